"""JSON handlers for the scoreboard API.

Handlers translate requests into pure ledger functions run through the
LedgerManager. Domain errors are raised, not caught, and turned into
JSON error responses by the app's exception handlers.
"""

from __future__ import annotations

import datetime as dt
import json
from functools import partial
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ValidationError
from starlette.responses import JSONResponse

from scoring.logic import importing, ledger, stats, views
from scoring.logic.enums import OverrideKind, TableOrder
from scoring.logic.models import Duration
from scoring.logic.overrides import scope_key
from scoring.logic.ranking import move_entry
from scoring.logic.selection import latest_date, select_for_year
from scoreboard.views.types import (
    FundRequest,
    PlayerRequest,
    RankingOrderRequest,
    RecordGameRequest,
    WinnerRequest,
)
from shared.build_info import APP_VERSION, GIT_COMMIT

if TYPE_CHECKING:
    from starlette.requests import Request

    from scoring.logic.models import Ledger
    from scoring.session.manager import LedgerManager

logger = structlog.get_logger()

# chart query value selecting the whole year instead of one day
ALL_DATES = "all"


class RequestError(Exception):
    """Malformed path, query or body. Reported as 422."""


def _manager(request: Request) -> LedgerManager:
    return request.app.state.ledger_manager


def _dump(model: BaseModel | None) -> Any:  # noqa: ANN401
    return model.model_dump(mode="json") if model is not None else None


async def _parse_body(request: Request, model: type[BaseModel]) -> Any:  # noqa: ANN401
    raw_body = await request.body()
    try:
        body = json.loads(raw_body) if raw_body.strip() else {}
    except (ValueError, json.JSONDecodeError) as e:  # fmt: skip
        raise RequestError("Invalid JSON body") from e
    if not isinstance(body, dict):
        raise RequestError("JSON body must be an object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise RequestError(str(e)) from e


def _path_date(request: Request, name: str = "day") -> dt.date:
    raw = request.path_params[name]
    try:
        return dt.date.fromisoformat(raw)
    except ValueError as e:
        raise RequestError(f"Invalid date '{raw}', expected yyyy-mm-dd") from e


def _query_int(request: Request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RequestError(f"Invalid {name} '{raw}'") from e


def _ledger_summary(current: Ledger) -> dict[str, Any]:
    return {"revision": current.revision, "players": list(current.players), "games": len(current.games)}


async def health(request: Request) -> JSONResponse:
    return JSONResponse(
        {
            "status": "ok",
            "version": APP_VERSION,
            "commit": GIT_COMMIT,
            "ledger_source": _manager(request).source,
        },
    )


async def list_players(request: Request) -> JSONResponse:
    return JSONResponse({"players": list(_manager(request).ledger.players)})


async def add_player(request: Request) -> JSONResponse:
    body = await _parse_body(request, PlayerRequest)
    updated = await _manager(request).apply(partial(ledger.add_player, name=body.name))
    logger.info("player added", player=body.name.strip())
    return JSONResponse({"players": list(updated.players)}, status_code=201)


async def remove_player(request: Request) -> JSONResponse:
    name = request.path_params["name"]
    updated = await _manager(request).apply(partial(ledger.remove_player, name=name))
    logger.info("player removed", player=name)
    return JSONResponse({"players": list(updated.players)})


async def score_table(request: Request) -> JSONResponse:
    year = request.path_params["year"]
    raw_order = request.query_params.get("order", TableOrder.NEWEST_FIRST.value)
    try:
        order = TableOrder(raw_order)
    except ValueError as e:
        raise RequestError(f"Invalid order '{raw_order}'") from e
    table = views.score_table(_manager(request).ledger, year, newest_first=order is TableOrder.NEWEST_FIRST)
    return JSONResponse(_dump(table))


async def recent_games(request: Request) -> JSONResponse:
    rows = views.recent_games(_manager(request).ledger, request.path_params["year"])
    return JSONResponse({"games": [_dump(row) for row in rows]})


async def daily_ranking(request: Request) -> JSONResponse:
    ranking = views.daily_ranking(_manager(request).ledger, request.path_params["year"])
    return JSONResponse({"ranking": _dump(ranking)})


async def yearly_ranking(request: Request) -> JSONResponse:
    ranking = views.yearly_ranking(_manager(request).ledger, request.path_params["year"])
    return JSONResponse({"ranking": _dump(ranking)})


async def year_summary(request: Request) -> JSONResponse:
    current = _manager(request).ledger
    records = select_for_year(current.games, request.path_params["year"], exclude_open=True)
    return JSONResponse({"summary": _dump(stats.summarize_year(records, current.players))})


async def charts(request: Request) -> JSONResponse:
    """
    GET /years/{year}/charts?date=all|yyyy-mm-dd.

    Without a date the latest day with scored games is shown, or the whole
    year when there is none.
    """
    current = _manager(request).ledger
    year = request.path_params["year"]
    raw = request.query_params.get("date")
    if raw is None:
        day = latest_date(select_for_year(current.games, year, exclude_open=True))
    elif raw == ALL_DATES:
        day = None
    else:
        try:
            day = dt.date.fromisoformat(raw)
        except ValueError as e:
            raise RequestError(f"Invalid date '{raw}', expected yyyy-mm-dd or '{ALL_DATES}'") from e
    return JSONResponse(_dump(stats.chart_data(current.games, current.players, year, day)))


async def record_game(request: Request) -> JSONResponse:
    body = await _parse_body(request, RecordGameRequest)
    duration = Duration(minutes=body.duration.minutes, seconds=body.duration.seconds) if body.duration else None

    def _record(current: Ledger) -> Ledger:
        return ledger.record_game(
            current,
            body.date,
            body.scores,
            body.game_type or current.last_game_type,
            is_open=body.is_open,
            duration=duration,
        )

    updated = await _manager(request).apply(_record)
    game = updated.games[-1]
    logger.info("recorded game", game_id=game.id, day=game.date, game_type=game.game_type, is_open=game.is_open)
    return JSONResponse(
        {"game": importing.dump_game(game), "revision": updated.revision},
        status_code=201,
    )


async def delete_game(request: Request) -> JSONResponse:
    game_id = request.path_params["game_id"]
    updated = await _manager(request).apply(partial(ledger.delete_game, game_id=game_id))
    logger.info("deleted game", game_id=game_id)
    return JSONResponse(_ledger_summary(updated))


async def toggle_true_winner(request: Request) -> JSONResponse:
    game_id = request.path_params["game_id"]
    body = await _parse_body(request, WinnerRequest)
    updated = await _manager(request).apply(
        partial(ledger.toggle_game_true_winner, game_id=game_id, player=body.player),
    )
    game = updated.find_game(game_id)
    return JSONResponse({"game": importing.dump_game(game) if game else None, "revision": updated.revision})


async def cycle_game_type(request: Request) -> JSONResponse:
    game_id = request.path_params["game_id"]
    updated = await _manager(request).apply(partial(ledger.cycle_game_type, game_id=game_id))
    game = updated.find_game(game_id)
    return JSONResponse({"game": importing.dump_game(game) if game else None, "revision": updated.revision})


async def delete_games_on(request: Request) -> JSONResponse:
    day = _path_date(request)
    updated = await _manager(request).apply(partial(ledger.delete_games_on, day=day))
    logger.info("deleted games on date", day=day)
    return JSONResponse(_ledger_summary(updated))


async def delete_games_in_year(request: Request) -> JSONResponse:
    year = request.path_params["year"]
    updated = await _manager(request).apply(partial(ledger.delete_games_in_year, year=year))
    logger.info("deleted games in year", year=year)
    return JSONResponse(_ledger_summary(updated))


async def clear_games(request: Request) -> JSONResponse:
    updated = await _manager(request).apply(ledger.clear_games)
    logger.warning("cleared all games")
    return JSONResponse(_ledger_summary(updated))


async def toggle_daily_winner(request: Request) -> JSONResponse:
    day = _path_date(request)
    body = await _parse_body(request, WinnerRequest)
    updated = await _manager(request).apply(partial(ledger.toggle_day_winner, day=day, player=body.player))
    key = scope_key(OverrideKind.DAILY, day)
    return JSONResponse({"scope_key": key, "winner": updated.overrides.winner_for(key)})


async def toggle_yearly_winner(request: Request) -> JSONResponse:
    year = request.path_params["year"]
    body = await _parse_body(request, WinnerRequest)
    updated = await _manager(request).apply(partial(ledger.toggle_year_winner, year=year, player=body.player))
    key = scope_key(OverrideKind.YEARLY, year)
    return JSONResponse({"scope_key": key, "winner": updated.overrides.winner_for(key)})


def _ranking_scope(request: Request) -> tuple[OverrideKind, dt.date | int, int]:
    """Resolve kind, period and the year whose games are ranked from the path and ?year=."""
    raw_kind = request.path_params["kind"]
    try:
        kind = OverrideKind(raw_kind)
    except ValueError as e:
        raise RequestError(f"Invalid ranking kind '{raw_kind}'") from e

    period: dt.date | int
    if kind is OverrideKind.DAILY:
        period = _path_date(request, "period")
        default_year = period.year
    else:
        try:
            period = int(request.path_params["period"])
        except ValueError as e:
            raise RequestError(f"Invalid year '{request.path_params['period']}'") from e
        default_year = period
    return kind, period, _query_int(request, "year", default_year)


async def ranking_editor(request: Request) -> JSONResponse:
    """GET /overrides/ranking/{kind}/{period}: the current order with tie flags, as the editor shows it."""
    kind, period, year = _ranking_scope(request)
    view = views.ranking_for_scope(_manager(request).ledger, year, kind, period)
    return JSONResponse(_dump(view))


async def save_ranking_order(request: Request) -> JSONResponse:
    kind, period, year = _ranking_scope(request)
    body = await _parse_body(request, RankingOrderRequest)
    key = scope_key(kind, period)
    updated = await _manager(request).apply(partial(ledger.reorder_ranking, key=key, players=body.players))
    logger.info("saved ranking order", scope_key=key, order=body.players)
    return JSONResponse(_dump(views.ranking_for_scope(updated, year, kind, period)))


async def move_ranking_entry(request: Request) -> JSONResponse:
    """POST /overrides/ranking/{kind}/{period}/move: swap one player with a neighbour and save the order."""
    kind, period, year = _ranking_scope(request)
    index = _query_int(request, "index", -1)
    direction = _query_int(request, "direction", 0)
    if direction not in (-1, 1):
        raise RequestError("direction must be -1 or 1")
    key = scope_key(kind, period)

    def _move(current: Ledger) -> Ledger:
        order = [entry.player for entry in views.ranking_for_scope(current, year, kind, period).entries]
        return ledger.reorder_ranking(current, key, move_entry(order, index, direction))

    updated = await _manager(request).apply(_move)
    return JSONResponse(_dump(views.ranking_for_scope(updated, year, kind, period)))


async def reset_ranking_order(request: Request) -> JSONResponse:
    kind, period, year = _ranking_scope(request)
    updated = await _manager(request).apply(partial(ledger.reset_ranking, key=scope_key(kind, period)))
    return JSONResponse(_dump(views.ranking_for_scope(updated, year, kind, period)))


async def get_fund(request: Request) -> JSONResponse:
    return JSONResponse({"fund": _manager(request).ledger.fund})


async def set_fund(request: Request) -> JSONResponse:
    body = await _parse_body(request, FundRequest)
    updated = await _manager(request).apply(partial(ledger.set_fund, amount=body.amount))
    logger.info("fund updated", fund=updated.fund)
    return JSONResponse({"fund": updated.fund})


async def import_table(request: Request) -> JSONResponse:
    """POST /import/table?year=: body is the comma-separated table as plain text."""
    manager = _manager(request)
    year = _query_int(request, "year", dt.datetime.now(tz=dt.UTC).year)
    try:
        text = (await request.body()).decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise RequestError("Table import must be UTF-8 text") from e
    parsed = importing.TableImport(records=[])

    def _append(current: Ledger) -> Ledger:
        nonlocal parsed
        parsed = importing.parse_score_table(text, year, current.players)
        return ledger.append_games(current, parsed.records)

    updated = await manager.apply(_append)
    return JSONResponse(
        {
            "imported": len(parsed.records),
            "skipped": parsed.skipped,
            "skipped_summary": parsed.skipped_summary,
            "skipped_invalid_date": parsed.skipped_invalid_date,
            "skipped_no_score": parsed.skipped_no_score,
            "revision": updated.revision,
        },
    )


async def import_snapshot(request: Request) -> JSONResponse:
    snapshot = importing.parse_snapshot_import(await request.body())
    added = 0

    def _merge(current: Ledger) -> Ledger:
        nonlocal added
        merged, added = ledger.merge_games(current, snapshot.games, snapshot.players)
        return merged

    updated = await _manager(request).apply(_merge)
    logger.info("imported snapshot", added=added, skipped=len(snapshot.games) - added)
    return JSONResponse({"added": added, "skipped": len(snapshot.games) - added, **_ledger_summary(updated)})


async def export_snapshot(request: Request) -> JSONResponse:
    return JSONResponse(importing.export_snapshot(_manager(request).ledger))
