import random

from rasengan_core.camera import Camera3D, InputState
from rasengan_core.data_models import init_rasengan
from rasengan_core.frame_loop import FrameLoop, frame_limit, until_closed
from rasengan_core.motion import OrbiterMotion


class FakeRenderer:
    def __init__(self, quit_on_poll=None):
        self.quit_on_poll = quit_on_poll
        self.polls = 0
        self.draws = 0

    def poll(self):
        self.polls += 1
        return InputState(quit=self.polls == self.quit_on_poll)

    def tick(self):
        return 1 / 60

    def draw(self, effect, camera):
        self.draws += 1

    def capture(self):
        return b"frame-%d" % self.draws


class ListSink:
    def __init__(self):
        self.frames = []

    def write(self, frame):
        self.frames.append(frame)


def make_loop(renderer, camera_calls):
    effect = init_rasengan((0.0, 1.0, 0.0), (0, 180, 255, 255), (200, 255, 255, 255),
                           0.3, 0.3, 0.9, 1.5, random.Random(0), count=6)

    def camera_update(cam, inputs, dt):
        camera_calls.append(dt)

    return FrameLoop(renderer, effect, OrbiterMotion(random.Random(0)), Camera3D(), camera_update)


def test_frame_limit_runs_fixed_count_and_feeds_sink():
    calls = []
    renderer = FakeRenderer()
    loop = make_loop(renderer, calls)
    sink = ListSink()
    frames = loop.run(frame_limit(5), sink)
    assert frames == 5
    assert sink.frames == [b"frame-%d" % i for i in range(1, 6)]
    assert calls == [1 / 60] * 5
    assert all(len(o.trail) == 5 for o in loop.effect.orbiters)


def test_until_closed_stops_on_quit():
    calls = []
    renderer = FakeRenderer(quit_on_poll=3)
    loop = make_loop(renderer, calls)
    assert loop.run(until_closed) == 2
    assert renderer.polls == 3


def test_window_close_ends_export_early():
    renderer = FakeRenderer(quit_on_poll=4)
    loop = make_loop(renderer, [])
    sink = ListSink()
    assert loop.run(frame_limit(100), sink) == 3
    assert len(sink.frames) == 3


def test_predicates():
    assert frame_limit(2)(1, InputState()) is False
    assert frame_limit(2)(2, InputState()) is True
    assert frame_limit(2)(0, InputState(quit=True)) is True
    assert until_closed(10 ** 6, InputState()) is False
