"""Journal HTTP API: FastAPI application.

Exposes one user's journal over JSON: trade CRUD, the dashboard view
model, chart and calendar breakdowns, the violation rule catalog, and
export/import/report.  The caller is identified by the ``X-User-Id``
header; authentication itself happens upstream.

Each request loads the caller's trades into a fresh ``TradeJournal``.
Custom violation rules are kept per user for the lifetime of the app.

Usage::

    from trading_journal.api.app import create_app

    app = create_app(settings=load_settings("journal.toml"))
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel

from trading_journal.analytics.performance import (
    daily_profit,
    monthly_performance,
    symbol_performance,
)
from trading_journal.analytics.violations import ViolationCatalog
from trading_journal.core.clock import IClock, WallClock
from trading_journal.core.config import Settings
from trading_journal.core.enums import Direction, ExportFormat, StorageBackend
from trading_journal.core.errors import (
    ImportValidationError,
    StoreError,
    StorePermissionError,
    StoreUnavailableError,
    TradeNotFoundError,
)
from trading_journal.core.interfaces import ITradeStore
from trading_journal.core.models import DateRange, FilterOptions, ProfitRange, Trade
from trading_journal.journal.export import (
    TradeExporter,
    export_filename,
    report_filename,
)
from trading_journal.journal.journal import TradeJournal
from trading_journal.storage.memory import InMemoryTradeStore

logger = logging.getLogger(__name__)


class CustomRuleRequest(BaseModel):
    label: str


def _default_store(settings: Settings) -> ITradeStore:
    if settings.storage.backend == StorageBackend.SQL:
        from trading_journal.storage.sql import SqlTradeStore

        return SqlTradeStore.from_url(
            settings.storage.database_url, echo=settings.storage.echo_sql
        )
    return InMemoryTradeStore()


def _status_for(exc: StoreError) -> int:
    if isinstance(exc, TradeNotFoundError):
        return 404
    if isinstance(exc, StorePermissionError):
        return 403
    if isinstance(exc, StoreUnavailableError):
        return 503
    return 500


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def create_app(
    store: ITradeStore | None = None,
    settings: Settings | None = None,
    clock: IClock | None = None,
) -> FastAPI:
    """Create the journal API application.

    Falls back to the store selected by ``settings.storage`` when no
    store is passed in.
    """
    if settings is None:
        settings = Settings()
    app = FastAPI(title="Trading Journal", docs_url=None, redoc_url=None)

    app.state.settings = settings
    app.state.store = store if store is not None else _default_store(settings)
    app.state.clock = clock if clock is not None else WallClock()
    app.state.catalogs: dict[str, ViolationCatalog] = {}
    analytics = settings.analytics

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    def current_user(x_user_id: str | None = Header(default=None)) -> str:
        if not x_user_id:
            raise HTTPException(status_code=401, detail="Missing X-User-Id header")
        return x_user_id

    def user_journal(user_id: str = Depends(current_user)) -> TradeJournal:
        catalog = app.state.catalogs.setdefault(
            user_id, ViolationCatalog(clock=app.state.clock)
        )
        journal = TradeJournal(
            app.state.store,
            settings=settings,
            clock=app.state.clock,
            catalog=catalog,
        )
        journal.load(user_id)
        return journal

    def owned_trade(trade_id: str, journal: TradeJournal) -> Trade:
        trade = journal.get_trade(trade_id)
        if trade is None:
            raise HTTPException(status_code=404, detail=f"Trade not found: {trade_id}")
        return trade

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    @app.get("/trades")
    def list_trades(
        symbol: list[str] = Query(default=[]),
        direction: Direction | None = None,
        strategy: list[str] = Query(default=[]),
        tag: list[str] = Query(default=[]),
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
        min_profit: float | None = None,
        max_profit: float | None = None,
        journal: TradeJournal = Depends(user_journal),
    ) -> list[dict[str, Any]]:
        date_range = None
        if start_date is not None or end_date is not None:
            date_range = DateRange(
                start_date=start_date or dt.date.min,
                end_date=end_date or dt.date.max,
            )
        filtered = journal.update_filters(
            FilterOptions(
                date_range=date_range,
                symbols=symbol,
                direction=direction,
                strategies=strategy,
                tags=tag,
                profit_range=ProfitRange(min=min_profit, max=max_profit),
            )
        )
        return [t.model_dump(mode="json") for t in filtered]

    @app.post("/trades", status_code=201)
    def create_trade(
        trade: Trade, journal: TradeJournal = Depends(user_journal)
    ) -> dict[str, Any]:
        return journal.add_trade(trade).model_dump(mode="json")

    @app.get("/trades/{trade_id}")
    def get_trade(
        trade_id: str, journal: TradeJournal = Depends(user_journal)
    ) -> dict[str, Any]:
        return owned_trade(trade_id, journal).model_dump(mode="json")

    @app.put("/trades/{trade_id}")
    def update_trade(
        trade_id: str,
        trade: Trade,
        journal: TradeJournal = Depends(user_journal),
    ) -> dict[str, Any]:
        existing = owned_trade(trade_id, journal)
        changed = trade.model_copy(
            update={"id": trade_id, "created_at": existing.created_at}
        )
        return journal.update_trade(changed).model_dump(mode="json")

    @app.delete("/trades/{trade_id}", status_code=204)
    def delete_trade(
        trade_id: str, journal: TradeJournal = Depends(user_journal)
    ) -> Response:
        owned_trade(trade_id, journal)
        journal.delete_trade(trade_id)
        return Response(status_code=204)

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    @app.get("/dashboard")
    def dashboard(journal: TradeJournal = Depends(user_journal)) -> dict[str, Any]:
        return journal.dashboard().to_dict()

    @app.get("/analytics/monthly")
    def monthly(journal: TradeJournal = Depends(user_journal)) -> dict[str, Any]:
        return monthly_performance(
            journal.trades, formula=analytics.profit_formula
        ).to_dict()

    @app.get("/analytics/symbols")
    def symbols(journal: TradeJournal = Depends(user_journal)) -> dict[str, Any]:
        return symbol_performance(
            journal.trades, formula=analytics.profit_formula
        ).to_dict()

    @app.get("/calendar/{year}/{month}")
    def calendar(
        year: int, month: int, journal: TradeJournal = Depends(user_journal)
    ) -> dict[str, Any]:
        if not 1 <= month <= 12:
            raise HTTPException(status_code=422, detail=f"Invalid month: {month}")
        days = daily_profit(
            journal.trades, year, month, formula=analytics.profit_formula
        )
        counts: dict[dt.date, int] = {}
        for trade in journal.trades:
            if trade.date in days:
                counts[trade.date] = counts.get(trade.date, 0) + 1
        return {
            "year": year,
            "month": month,
            "days": [
                {"date": day.isoformat(), "profit": profit, "trades": counts[day]}
                for day, profit in days.items()
            ],
        }

    # ------------------------------------------------------------------
    # Violation rules
    # ------------------------------------------------------------------

    @app.get("/violations/rules")
    def list_rules(journal: TradeJournal = Depends(user_journal)) -> list[dict[str, Any]]:
        return [rule.model_dump() for rule in journal.catalog.rules()]

    @app.post("/violations/rules", status_code=201)
    def add_rule(
        body: CustomRuleRequest, journal: TradeJournal = Depends(user_journal)
    ) -> dict[str, Any]:
        try:
            rule = journal.catalog.add_custom(body.label)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return rule.model_dump()

    # ------------------------------------------------------------------
    # Export / import / report
    # ------------------------------------------------------------------

    @app.get("/export")
    def export(
        format: ExportFormat = ExportFormat.JSON,
        journal: TradeJournal = Depends(user_journal),
    ) -> Response:
        exporter = TradeExporter(config=analytics)
        trades = list(journal.trades)
        filename = export_filename(app.state.clock.now().date())
        if format == ExportFormat.CSV:
            return Response(
                exporter.to_csv(trades),
                media_type="text/csv",
                headers=_attachment(filename.replace(".json", ".csv")),
            )
        return Response(
            exporter.to_json(trades),
            media_type="application/json",
            headers=_attachment(filename),
        )

    @app.post("/import")
    async def import_trades(
        request: Request, journal: TradeJournal = Depends(user_journal)
    ) -> dict[str, Any]:
        body = (await request.body()).decode("utf-8", errors="replace")
        try:
            trades = TradeExporter().from_json(body)
        except ImportValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        imported = await run_in_threadpool(journal.import_trades, trades)
        logger.info("Imported %d trades", len(imported))
        return {"imported": len(imported)}

    @app.get("/report", response_class=PlainTextResponse)
    def report(journal: TradeJournal = Depends(user_journal)) -> PlainTextResponse:
        today = app.state.clock.now().date()
        text = TradeExporter(config=analytics).text_report(
            list(journal.filtered_trades), generated_on=today
        )
        return PlainTextResponse(text, headers=_attachment(report_filename(today)))

    # ------------------------------------------------------------------
    # Health endpoint
    # ------------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        status = _status_for(exc)
        if status >= 500:
            logger.error("Store failure on %s: %s", request.url.path, exc)
        return JSONResponse({"detail": str(exc)}, status_code=status)

    return app
