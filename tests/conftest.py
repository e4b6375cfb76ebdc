from collections import defaultdict

from fastapi.testclient import TestClient
import pytest

from src.overlay import AccessGate, AppState, RealtimeHub, create_app
from src.store import ChannelStore
from tests.util_constant import TEST_KEY


class FakeSocketServer:
    """Records rooms and emitted events per sid instead of talking to real sockets."""

    def __init__(self):
        self.handlers = {}
        self.rooms = defaultdict(set)
        self.sent = defaultdict(list)
        self.tasks = []

    def on(self, event, handler=None):
        self.handlers[event] = handler

    async def enter_room(self, sid, room):
        self.rooms[room].add(sid)

    async def emit(self, event, data=None, to=None):
        targets = self.rooms[to] if to in self.rooms else {to}
        for sid in targets:
            self.sent[sid].append((event, data))

    def start_background_task(self, target, *args):
        self.tasks.append((target, args))

    async def run_tasks(self):
        while self.tasks:
            target, args = self.tasks.pop(0)
            await target(*args)


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / 'data'


@pytest.fixture
def store(data_dir):
    return ChannelStore(data_dir)


@pytest.fixture
def app_state(store):
    state = AppState(store, AccessGate(TEST_KEY))
    state.load()
    return state


@pytest.fixture
def static_dir(tmp_path):
    path = tmp_path / 'static'
    path.mkdir()
    (path / 'overlay.css').write_text('body { color: red; }', encoding='utf-8')
    return path


@pytest.fixture
def client(app_state, static_dir):
    return TestClient(create_app(app_state, static_dir=static_dir))


@pytest.fixture
def fake_sio():
    return FakeSocketServer()


@pytest.fixture
def hub(app_state, fake_sio):
    return RealtimeHub(app_state, sio=fake_sio)


@pytest.fixture
def join(hub, fake_sio):
    """Connect a sid with the test key and deliver the join snapshot."""

    async def _join(sid, referer):
        joined = await hub.on_connect(sid, {'HTTP_REFERER': referer}, {'token': TEST_KEY})
        await fake_sio.run_tasks()
        return joined

    return _join
