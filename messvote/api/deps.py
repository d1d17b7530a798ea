"""Application context and request dependencies.

Everything the routes need is reached through one AppContext stored on
`app.state.context`; there is no module-level state.
"""
import secrets
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from messvote.domain.Student import Student
from messvote.events.Event_Bus import EventBus
from messvote.events.plan_subscriptions import SubscriptionManager
from messvote.events.web_observers import EventFeed
from messvote.infra.Blob_Store import LocalBlobStore
from messvote.infra.Complaint_Repository import ComplaintRepository
from messvote.infra.Document_Store import JsonDocumentStore
from messvote.infra.Menu_Repository import MenuRepository
from messvote.infra.Plan_Repository import PlanRepository
from messvote.infra.Settings_Repository import SettingsRepository
from messvote.infra.Student_Repository import StudentRepository
from messvote.infra.Vote_Repository import VoteRepository
from messvote.infra.paths import DATA_DIR
from messvote.logic.catalog.catalog import MenuCatalog
from messvote.logic.complaints.workflow import ComplaintDesk
from messvote.logic.planning.planner import MenuPlanner
from messvote.logic.results.aggregation import ResultsService
from messvote.logic.settings.voting_settings import VotingSettings
from messvote.logic.students.registry import StudentRegistry
from messvote.logic.voting.engine import VotingEngine
from messvote.utilities.clock import local_now
from messvote.utilities.config import ADMIN_PASSWORD, ADMIN_USERNAME, MEDIA_DIR
from messvote.utilities.errors import NotAuthenticated


@dataclass
class AppContext:
    clock: Callable[[], datetime]
    bus: EventBus
    store: JsonDocumentStore
    blobs: LocalBlobStore
    menu_repo: MenuRepository
    plan_repo: PlanRepository
    vote_repo: VoteRepository
    student_repo: StudentRepository
    complaint_repo: ComplaintRepository
    settings: VotingSettings
    catalog: MenuCatalog
    planner: MenuPlanner
    engine: VotingEngine
    results: ResultsService
    students: StudentRegistry
    complaints: ComplaintDesk
    feed: EventFeed
    subscriptions: SubscriptionManager


def build_context(data_dir: Optional[Path] = None, clock: Callable[[], datetime] = local_now,
                  media_dir: Optional[Path] = None, **engine_options) -> AppContext:
    """Wire stores, repositories and services for one application instance."""
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    if media_dir is None:
        media_dir = MEDIA_DIR if data_dir == DATA_DIR else data_dir / "media"
    bus = EventBus()
    store = JsonDocumentStore(data_dir, bus=bus)
    blobs = LocalBlobStore(media_dir)

    menu_repo = MenuRepository(store)
    plan_repo = PlanRepository(store)
    vote_repo = VoteRepository(store)
    student_repo = StudentRepository(store)
    complaint_repo = ComplaintRepository(store)

    settings = VotingSettings(SettingsRepository(store), bus)
    planner = MenuPlanner(plan_repo, menu_repo, bus, clock, lambda: settings.get_window().menu_cycle_days)
    engine = VotingEngine(store, vote_repo, student_repo, menu_repo, planner, settings, bus, clock,
                          **engine_options)
    return AppContext(
        clock=clock,
        bus=bus,
        store=store,
        blobs=blobs,
        menu_repo=menu_repo,
        plan_repo=plan_repo,
        vote_repo=vote_repo,
        student_repo=student_repo,
        complaint_repo=complaint_repo,
        settings=settings,
        catalog=MenuCatalog(menu_repo, blobs, clock),
        planner=planner,
        engine=engine,
        results=ResultsService(vote_repo, menu_repo, planner, settings, clock),
        students=StudentRegistry(student_repo, vote_repo, clock),
        complaints=ComplaintDesk(complaint_repo, blobs, clock),
        feed=EventFeed(),
        subscriptions=SubscriptionManager(bus, planner.snapshot),
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context


_basic = HTTPBasic(auto_error=False)


def require_admin(credentials: Optional[HTTPBasicCredentials] = Depends(_basic)) -> str:
    """Static shared admin credential."""
    if credentials is None:
        raise NotAuthenticated("Admin credentials required")
    user_ok = secrets.compare_digest(credentials.username.encode(), ADMIN_USERNAME.encode())
    pass_ok = secrets.compare_digest(credentials.password.encode(), ADMIN_PASSWORD.encode())
    if not (user_ok and pass_ok):
        raise NotAuthenticated("Invalid admin credentials")
    return credentials.username


def require_student(x_student_id: Optional[str] = Header(default=None),
                    ctx: AppContext = Depends(get_context)) -> Student:
    """Student identity is the registered id sent in the X-Student-Id header."""
    if not x_student_id:
        raise NotAuthenticated()
    student = ctx.student_repo.get(x_student_id.strip())
    if student is None:
        raise NotAuthenticated()
    return student
