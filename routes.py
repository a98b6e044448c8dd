import logging
import random
from typing import Any, Dict, List

from bson import ObjectId
from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.database import Database

from aggregations import get_maps_with_rounds, get_player_stats, get_unplayed_maps
from database import (
    MAPS,
    PLAYERS,
    ROUNDS,
    create_document,
    create_documents,
    get_document,
    get_documents,
    serialize_doc,
)
from errors import BadRequestError, ConflictError, NotFoundError
from schemas import Map, Player, Round
from validators import check_map_name_exists, validate_object_ids

log = logging.getLogger(__name__)


def _parse_id(id_: str, kind: str) -> ObjectId:
    if validate_object_ids([id_]).failed:
        raise BadRequestError(f"Invalid {kind} ID format", id=id_)
    return ObjectId(id_)


def make_router(db: Database) -> APIRouter:
    router = APIRouter(prefix="/api")

    @router.get("/ping", response_class=PlainTextResponse)
    def ping():
        return "pong"

    # Maps
    @router.get("/maps")
    def list_maps():
        return [serialize_doc(m) for m in get_maps_with_rounds(db)]

    @router.get("/map/{map_id}")
    def get_map(map_id: str):
        oid = _parse_id(map_id, "map")
        # absent maps come back as null, not 404
        return serialize_doc(get_document(db, MAPS, oid))

    @router.post("/map", status_code=status.HTTP_201_CREATED)
    def create_map(payload: Map):
        existing = check_map_name_exists(db, payload.name)
        if existing:
            raise ConflictError(
                "Map already exists in the database", map=serialize_doc(existing)
            )
        doc = create_document(db, MAPS, payload.model_dump())
        log.info(f"Created map '{payload.name}'")
        return serialize_doc(doc)

    @router.post("/maps")
    def create_maps(payload: List[Dict[str, Any]] = Body(...)):
        docs = create_documents(db, MAPS, payload)
        return [serialize_doc(d) for d in docs]

    @router.get("/randomMap")
    def random_map():
        candidates = get_unplayed_maps(db)
        if not candidates:
            raise NotFoundError("No unplayed maps found")
        return serialize_doc(random.choice(candidates))

    # Players
    @router.get("/players")
    def list_players():
        return [serialize_doc(p) for p in get_documents(db, PLAYERS)]

    @router.get("/player/{player_id}")
    def get_player(player_id: str):
        oid = _parse_id(player_id, "player")
        player = get_document(db, PLAYERS, oid)
        if not player:
            raise NotFoundError("Player not found", id=player_id)
        return {**serialize_doc(player), "stats": get_player_stats(db, oid)}

    @router.post("/player", status_code=status.HTTP_201_CREATED)
    def create_player(payload: Player):
        if db[PLAYERS].find_one({"name": payload.name}):
            # deliberately a 200, unlike duplicate maps
            return JSONResponse(
                {"message": f"Player with the name '{payload.name}' already exists"}
            )
        doc = create_document(db, PLAYERS, payload.model_dump())
        log.info(f"Created player '{payload.name}'")
        return serialize_doc(doc)

    @router.put("/player/{player_id}")
    def update_player(player_id: str, payload: Player):
        oid = _parse_id(player_id, "player")
        player = get_document(db, PLAYERS, oid)
        if not player:
            raise NotFoundError("Player not found", id=player_id)
        db[PLAYERS].update_one({"_id": oid}, {"$set": {"name": payload.name}})
        log.info(f"Renamed player {player_id} from '{player['name']}' to '{payload.name}'")
        return {
            "message": "Updated player successfully",
            "old_name": player["name"],
            "new_name": payload.name,
        }

    @router.delete("/player/{player_id}")
    def delete_player(player_id: str):
        oid = _parse_id(player_id, "player")
        player = get_document(db, PLAYERS, oid)
        if not player:
            raise NotFoundError("Player not found", id=player_id)
        db[PLAYERS].delete_one({"_id": oid})
        log.info(f"Deleted player {player_id}")
        return {"message": f"Player: {player['name']} deleted successfully"}

    # Rounds
    @router.get("/rounds")
    def list_rounds():
        return [serialize_doc(r) for r in get_documents(db, ROUNDS)]

    @router.get("/round/{round_id}")
    def get_round(round_id: str):
        oid = _parse_id(round_id, "round")
        return serialize_doc(get_document(db, ROUNDS, oid))

    @router.post("/round", status_code=status.HTTP_201_CREATED)
    def create_round(payload: Round):
        result = validate_object_ids([payload.mapId, *payload.players])
        if result.failed:
            raise BadRequestError("Invalid ID format", id=result.failed_id)

        map_oid = ObjectId(payload.mapId)
        if not get_document(db, MAPS, map_oid):
            raise BadRequestError("Map not found", id=payload.mapId)

        player_oids = []
        for player_id in payload.players:
            player_oid = ObjectId(player_id)
            if not get_document(db, PLAYERS, player_oid):
                raise BadRequestError("Player not found", id=player_id)
            player_oids.append(player_oid)

        data = payload.model_dump()
        data["mapId"] = map_oid
        data["players"] = player_oids
        doc = create_document(db, ROUNDS, data)
        log.info(f"Created round {doc['_id']} on map {payload.mapId}")
        return serialize_doc(doc)

    return router
