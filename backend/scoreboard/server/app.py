from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from scoreboard.server.settings import ScoreboardSettings
from scoreboard.views import handlers
from scoreboard.views.handlers import RequestError
from scoring.logic.exceptions import GameNotFoundError, LedgerError
from scoring.persistence.file_repository import FileSnapshotRepository
from scoring.session.manager import LedgerManager
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request


async def _ledger_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Rejected ledger operations and malformed requests: 422 with the reason."""
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.UNPROCESSABLE_ENTITY)


async def _not_found_handler(_request: Request, exc: Exception) -> JSONResponse:
    error = cast("GameNotFoundError", exc)
    return JSONResponse({"error": str(error), "game_id": error.game_id}, status_code=HTTPStatus.NOT_FOUND)


async def _storage_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Ledger could not be saved; the previous state is still in effect."""
    logger.error("ledger storage failed", error=str(exc))
    return JSONResponse(
        {"error": "Ledger could not be saved, the change was not applied"},
        status_code=HTTPStatus.SERVICE_UNAVAILABLE,
    )


def _routes() -> list[Route]:
    return [
        Route("/health", handlers.health, methods=["GET"], name="health"),
        # roster
        Route("/players", handlers.list_players, methods=["GET"], name="list_players"),
        Route("/players", handlers.add_player, methods=["POST"], name="add_player"),
        Route("/players/{name}", handlers.remove_player, methods=["DELETE"], name="remove_player"),
        # year views
        Route("/years/{year:int}/table", handlers.score_table, methods=["GET"], name="score_table"),
        Route("/years/{year:int}/recent", handlers.recent_games, methods=["GET"], name="recent_games"),
        Route("/years/{year:int}/rankings/daily", handlers.daily_ranking, methods=["GET"], name="daily_ranking"),
        Route("/years/{year:int}/rankings/yearly", handlers.yearly_ranking, methods=["GET"], name="yearly_ranking"),
        Route("/years/{year:int}/summary", handlers.year_summary, methods=["GET"], name="year_summary"),
        Route("/years/{year:int}/charts", handlers.charts, methods=["GET"], name="charts"),
        # games
        Route("/games", handlers.record_game, methods=["POST"], name="record_game"),
        Route("/games", handlers.clear_games, methods=["DELETE"], name="clear_games"),
        Route("/games/{game_id}", handlers.delete_game, methods=["DELETE"], name="delete_game"),
        Route(
            "/games/{game_id}/true-winner",
            handlers.toggle_true_winner,
            methods=["POST"],
            name="toggle_true_winner",
        ),
        Route("/games/{game_id}/cycle-type", handlers.cycle_game_type, methods=["POST"], name="cycle_game_type"),
        Route("/dates/{day}/games", handlers.delete_games_on, methods=["DELETE"], name="delete_games_on"),
        Route(
            "/years/{year:int}/games",
            handlers.delete_games_in_year,
            methods=["DELETE"],
            name="delete_games_in_year",
        ),
        # overrides
        Route("/overrides/daily/{day}", handlers.toggle_daily_winner, methods=["POST"], name="toggle_daily_winner"),
        Route(
            "/overrides/yearly/{year:int}",
            handlers.toggle_yearly_winner,
            methods=["POST"],
            name="toggle_yearly_winner",
        ),
        Route("/overrides/ranking/{kind}/{period}", handlers.ranking_editor, methods=["GET"], name="ranking_editor"),
        Route(
            "/overrides/ranking/{kind}/{period}",
            handlers.save_ranking_order,
            methods=["PUT"],
            name="save_ranking_order",
        ),
        Route(
            "/overrides/ranking/{kind}/{period}",
            handlers.reset_ranking_order,
            methods=["DELETE"],
            name="reset_ranking_order",
        ),
        Route(
            "/overrides/ranking/{kind}/{period}/move",
            handlers.move_ranking_entry,
            methods=["POST"],
            name="move_ranking_entry",
        ),
        # fund
        Route("/fund", handlers.get_fund, methods=["GET"], name="get_fund"),
        Route("/fund", handlers.set_fund, methods=["PUT"], name="set_fund"),
        # import / export
        Route("/import/table", handlers.import_table, methods=["POST"], name="import_table"),
        Route("/import/snapshot", handlers.import_snapshot, methods=["POST"], name="import_snapshot"),
        Route("/export", handlers.export_snapshot, methods=["GET"], name="export_snapshot"),
    ]


def create_app(
    settings: ScoreboardSettings | None = None,
    ledger_manager: LedgerManager | None = None,
) -> Starlette:
    """Build the scoreboard app.

    Without an explicit ledger_manager one is built over the data file
    (and backup file, when configured) from settings. The ledger is loaded
    in the app lifespan.
    """
    if settings is None:  # pragma: no cover
        settings = ScoreboardSettings()

    if ledger_manager is None:
        fallback = FileSnapshotRepository(settings.backup_file) if settings.backup_file else None
        ledger_manager = LedgerManager(
            FileSnapshotRepository(settings.data_file),
            fallback=fallback,
            default_players=settings.default_players,
        )

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        await ledger_manager.load()
        yield

    app = Starlette(
        routes=_routes(),
        lifespan=lifespan,
        exception_handlers={
            LedgerError: _ledger_error_handler,
            RequestError: _ledger_error_handler,
            GameNotFoundError: _not_found_handler,
            OSError: _storage_error_handler,
        },
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.state.settings = settings
    app.state.ledger_manager = ledger_manager

    logger.info("scoreboard server ready", data_file=str(settings.data_file))
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory scoreboard.server.app:get_app."""
    s = ScoreboardSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s)
