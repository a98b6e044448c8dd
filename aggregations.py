"""Read-only queries derived from the rounds collection."""
import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List

from bson import ObjectId
from pymongo.database import Database

from database import MAPS, ROUNDS

log = logging.getLogger(__name__)


def get_player_stats(db: Database, player_id: ObjectId) -> Dict[str, Any]:
    time_spent = 0.0
    total_score = 0
    rounds_played = 0
    for round_ in db[ROUNDS].find({"players": player_id}):
        rounds_played += 1
        total_score += round_.get("score", 0)
        # negative durations are summed as-is
        time_spent += (round_["endTime"] - round_["startTime"]).total_seconds()
    log.debug(f"Player {player_id}: {rounds_played} rounds, {time_spent}s played")
    return {
        "timeSpentPlayingSeconds": time_spent,
        "totalScore": total_score,
        "roundsPlayed": rounds_played,
    }


def group_rounds_by_map(rounds: Iterable[Dict[str, Any]]) -> Dict[Any, List[Dict[str, Any]]]:
    grouped = defaultdict(list)
    for round_ in rounds:
        grouped[round_.get("mapId")].append(round_)
    return dict(grouped)


def attach_rounds(maps: Iterable[Dict[str, Any]], rounds_by_map: Dict[Any, List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return [{**m, "rounds": rounds_by_map.get(m["_id"], [])} for m in maps]


def get_maps_with_rounds(db: Database) -> List[Dict[str, Any]]:
    rounds_by_map = group_rounds_by_map(db[ROUNDS].find())
    return attach_rounds(db[MAPS].find(), rounds_by_map)


def get_unplayed_maps(db: Database) -> List[Dict[str, Any]]:
    """Maps that no round references yet."""
    played = db[ROUNDS].distinct("mapId")
    return list(db[MAPS].find({"_id": {"$nin": played}}))
