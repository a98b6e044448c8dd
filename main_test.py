from unittest.mock import patch

import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

import main


def test_main_exits_when_database_unreachable():
    with patch("main.connect", side_effect=ServerSelectionTimeoutError("no servers")), patch(
        "main.uvicorn.run"
    ) as run:
        with pytest.raises(SystemExit) as exc_info:
            main.main()

    assert exc_info.value.code == 1
    run.assert_not_called()


def test_main_serves_after_connecting():
    db = mongomock.MongoClient()["geoguessr"]
    with patch("main.connect", return_value=db) as connect, patch("main.uvicorn.run") as run:
        main.main()

    connect.assert_called_once_with(main.MONGODB_URI, "geoguessr")
    run.assert_called_once()
    _, kwargs = run.call_args
    assert kwargs["port"] == 8080
