"""REST endpoints for the tier list: rankings, drag session, roster and export."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, model_validator

from ishtar_tierlist.config import settings
from ishtar_tierlist.models.ranking import HoverTarget, Ranked, RoleColumn, Unplaced
from ishtar_tierlist.services.drag_session import DragSession
from ishtar_tierlist.services.export import EXPORT_FILENAME, build_rankings_export
from ishtar_tierlist.services.ranking_store import RankingStore
from ishtar_tierlist.services.roster_provider import Roster, RosterUnavailableError

router = APIRouter(prefix="/api/rankings", tags=["rankings"])


class RankingsResponse(BaseModel):
    """Committed rankings."""

    rankings: dict[str, list[str]]
    has_saved: bool


class MutationResponse(BaseModel):
    """Result of a ranking operation."""

    changed: bool
    rankings: dict[str, list[str]]


class DisplayResponse(BaseModel):
    """Rankings as they should be rendered, drag preview included."""

    rankings: dict[str, list[str]]
    drag_status: str
    dragged_player: Optional[str] = None
    hover_column: Optional[RoleColumn] = None
    hover_index: Optional[int] = None


class InsertRequest(BaseModel):
    player: str
    index: Optional[int] = None  # None appends


class MoveRequest(BaseModel):
    from_column: RoleColumn
    from_index: int
    to_column: RoleColumn
    to_index: Optional[int] = None


class DragStartRequest(BaseModel):
    """Start a drag; column + index mark a ranked origin, neither means the roster pool."""

    player: str
    column: Optional[RoleColumn] = None
    index: Optional[int] = None

    @model_validator(mode="after")
    def origin_is_complete(self):
        if (self.column is None) != (self.index is None):
            raise ValueError("column and index must be given together")
        return self


class HoverRequest(BaseModel):
    column: RoleColumn
    index: Optional[int] = None


class DropRequest(BaseModel):
    column: Optional[RoleColumn] = None
    index: Optional[int] = None


class RosterPlayerInfo(BaseModel):
    name: str
    team_name: str
    team_color: str
    role: Optional[RoleColumn] = None


class RosterTeamInfo(BaseModel):
    id: str
    name: str
    color: str
    players: list[RosterPlayerInfo]


class RosterResponse(BaseModel):
    teams: list[RosterTeamInfo]


def _store(request: Request) -> RankingStore:
    return request.app.state.ranking_store


def _session(request: Request) -> DragSession:
    return request.app.state.drag_session


def _mutation(store: RankingStore, changed: bool) -> MutationResponse:
    return MutationResponse(changed=changed, rankings=store.snapshot())


def _display(session: DragSession) -> DisplayResponse:
    hover = session.hover_target
    return DisplayResponse(
        rankings=session.display_rankings().to_dict(),
        drag_status=session.status.value,
        dragged_player=session.item.player if session.item else None,
        hover_column=hover.column if hover else None,
        hover_index=hover.index if hover else None,
    )


@router.get("", response_model=RankingsResponse)
def get_rankings(request: Request):
    """Committed rankings and whether a saved copy exists."""
    store = _store(request)
    has_saved = store.storage.has_saved() if store.storage else False
    return RankingsResponse(rankings=store.snapshot(), has_saved=has_saved)


@router.get("/display", response_model=DisplayResponse)
def get_display_rankings(request: Request):
    """Rankings with the in-flight drag previewed in the hovered column."""
    return _display(_session(request))


@router.post("/move", response_model=MutationResponse)
def move_player(request: Request, body: MoveRequest):
    """Move a ranked player within a column or into another one."""
    store = _store(request)
    if body.from_column == body.to_column:
        changed = store.move_within_column(body.from_column, body.from_index, body.to_index)
    else:
        changed = store.move_between_columns(
            body.from_column, body.from_index, body.to_column, body.to_index
        )
    return _mutation(store, changed)


@router.post("/drag/start", response_model=DisplayResponse)
def drag_start(request: Request, body: DragStartRequest):
    session = _session(request)
    if body.column is None:
        session.start(Unplaced(player=body.player))
    else:
        session.start(Ranked(player=body.player, column=body.column, index=body.index))
    return _display(session)


@router.post("/drag/hover", response_model=DisplayResponse)
def drag_hover(request: Request, body: HoverRequest):
    session = _session(request)
    session.hover(body.column, body.index)
    return _display(session)


@router.post("/drag/leave", response_model=DisplayResponse)
def drag_leave(request: Request):
    session = _session(request)
    session.leave()
    return _display(session)


@router.post("/drag/drop", response_model=MutationResponse)
def drag_drop(request: Request, body: DropRequest | None = None):
    """Commit the drag at the given target, or at the last hover target."""
    session = _session(request)
    target = None
    if body is not None and body.column is not None:
        target = HoverTarget(column=body.column, index=body.index)
    changed = session.drop(target)
    return _mutation(_store(request), changed)


@router.post("/drag/end", response_model=DisplayResponse)
async def drag_end(request: Request):
    """Drag-end or global pointer-up: cancel after the grace delay if nothing dropped."""
    session = _session(request)
    await session.end()
    return _display(session)


async def _load_roster(request: Request) -> Roster:
    roster = getattr(request.app.state, "roster", None)
    if roster is not None:
        return roster
    provider = getattr(request.app.state, "roster_provider", None)
    if provider is None:
        raise HTTPException(503, "Roster unavailable: no roster source configured")
    try:
        roster = await provider.fetch()
    except RosterUnavailableError as e:
        raise HTTPException(503, f"Roster unavailable: {e}") from e
    # Fetched once per session
    request.app.state.roster = roster
    return roster


@router.get("/roster", response_model=RosterResponse)
async def get_roster(request: Request):
    """Teams with their players, resolved for display."""
    roster = await _load_roster(request)
    teams = []
    for team in roster.teams:
        players = []
        for name in team.players:
            ref = roster.resolve(name)
            player = roster.get_player(name)
            players.append(
                RosterPlayerInfo(
                    name=ref.name,
                    team_name=ref.team_name,
                    team_color=ref.team_color,
                    role=player.role if player else None,
                )
            )
        teams.append(RosterTeamInfo(id=team.id, name=team.name, color=team.color, players=players))
    return RosterResponse(teams=teams)


@router.get("/export")
def export_rankings(request: Request):
    """Download the current rankings as rankings.json."""
    if not getattr(request.app.state, "settings", settings).enable_export_import:
        raise HTTPException(404, "Export is disabled")
    document = build_rankings_export(_store(request).snapshot())
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.delete("", response_model=MutationResponse)
def clear_rankings(request: Request):
    """Empty every column and delete the saved rankings."""
    store = _store(request)
    store.clear()
    return _mutation(store, True)


@router.post("/{column}/players", response_model=MutationResponse)
def insert_player(request: Request, column: RoleColumn, body: InsertRequest):
    """Place a roster player into a column."""
    store = _store(request)
    return _mutation(store, store.insert(column, body.index, body.player))


@router.delete("/{column}/{index}", response_model=MutationResponse)
def remove_player(request: Request, column: RoleColumn, index: int):
    """Remove the player at ``index``; out-of-range indices change nothing."""
    store = _store(request)
    return _mutation(store, store.remove(column, index))
