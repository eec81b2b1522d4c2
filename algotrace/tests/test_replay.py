"""
Tests for the replay controller and its schedulers.
"""

import asyncio

import pytest

from algotrace.algorithms import avl, dijkstra, huffman
from algotrace.config import ReplayConfig
from algotrace.models import BinaryTree
from algotrace.replay import AsyncioScheduler, EventQueue, ReplayController, VirtualScheduler
from algotrace.traces import StepKind


# =============================================================================
# Scheduler Tests
# =============================================================================

class TestVirtualScheduler:
    def test_queue_orders_by_time(self):
        queue = EventQueue()
        late = queue.schedule(2.0, lambda: "late")
        early = queue.schedule(1.0, lambda: "early")
        assert queue.next_event() is early
        assert queue.next_event() is late
        assert late.callback() == "late"
        assert queue.next_event() is None

    def test_nothing_runs_until_advanced(self, scheduler):
        calls = []
        scheduler.call_later(1.0, lambda: calls.append(1))
        assert calls == []
        assert scheduler.pending == 1
        assert scheduler.advance(0.5) == 0
        assert scheduler.advance(0.5) == 1
        assert calls == [1]
        assert scheduler.now == 1.0

    def test_same_time_runs_in_scheduling_order(self, scheduler):
        calls = []
        scheduler.call_later(1.0, lambda: calls.append("a"))
        scheduler.call_later(1.0, lambda: calls.append("b"))
        scheduler.run_until_idle()
        assert calls == ["a", "b"]

    def test_cancelled_events_skipped(self, scheduler):
        calls = []
        handle = scheduler.call_later(1.0, lambda: calls.append(1))
        scheduler.cancel(handle)
        assert scheduler.pending == 0
        assert scheduler.run_until_idle() == 0
        assert calls == []

    def test_clock_never_goes_backwards(self, scheduler):
        scheduler.advance(2.0)
        with pytest.raises(AssertionError):
            scheduler.clock.advance_to(1.0)


# =============================================================================
# Cursor Tests
# =============================================================================

class TestStepping:
    def test_load_starts_at_initial_state(self, controller, bst_trace):
        controller.load(bst_trace)
        assert controller.cursor == 0
        assert controller.total == 4
        assert controller.current_step is None
        assert controller.materialized.inorder() == [30, 50, 70]

    def test_forward_to_end(self, controller, bst_trace):
        controller.load(bst_trace)
        moves = [controller.step_forward() for _ in range(5)]
        assert moves == [True, True, True, True, False]
        assert controller.at_end
        assert controller.materialized.inorder() == [20, 30, 50, 70]

    def test_backward_at_start(self, controller, bst_trace):
        controller.load(bst_trace)
        assert controller.step_backward() is False
        assert controller.cursor == 0

    def test_backward_then_forward_is_deterministic(self, controller):
        """Revisiting a cursor shows the same structure every time."""
        trace = avl.insert_batch(BinaryTree(), [10, 20, 30, 40, 50, 25])
        controller.load(trace)
        seen = {}
        while controller.step_forward():
            seen[controller.cursor] = controller.materialized.to_dict()
        while controller.step_backward():
            if controller.cursor:
                assert controller.materialized.to_dict() == seen[controller.cursor]
        for cursor in (3, 1, len(trace), 7):
            controller.seek(cursor)
            assert controller.materialized.to_dict() == seen[cursor]

    def test_materialized_is_independent(self, controller, bst_trace):
        """Mutating a materialized structure never changes the trace."""
        controller.load(bst_trace)
        controller.to_end()
        structure = controller.materialized
        structure.nodes[structure.root].value = -1
        assert controller.materialized.nodes[structure.root].value == 50

    def test_editing_trace_snapshots_leaves_replay_unchanged(self, controller, bst_trace):
        controller.load(bst_trace)
        controller.to_end()
        final = bst_trace.final
        final.nodes[final.root].value = -999
        initial = bst_trace.snapshot_at(0)
        initial.nodes[initial.root].value = -1
        assert controller.materialized.inorder() == [20, 30, 50, 70]
        assert bst_trace.final.inorder() == [20, 30, 50, 70]
        controller.reset()
        assert controller.materialized.inorder() == [30, 50, 70]

    def test_seek_out_of_range(self, controller, bst_trace):
        controller.load(bst_trace)
        with pytest.raises(IndexError):
            controller.seek(5)

    def test_reset(self, controller, bst_trace):
        controller.load(bst_trace)
        controller.to_end()
        controller.reset()
        assert controller.cursor == 0


# =============================================================================
# Autoplay Tests
# =============================================================================

class TestAutoplay:
    def test_one_step_per_delay(self, controller, scheduler, bst_trace):
        """At speed 10 each tick is 0.1s apart and play stops at the end."""
        controller.load(bst_trace)
        controller.run(speed=10)
        assert controller.is_playing
        assert controller.delay == pytest.approx(0.1)

        for expected in (1, 2, 3, 4):
            assert scheduler.advance(0.1) == 1
            assert controller.cursor == expected
        assert not controller.is_playing
        assert scheduler.pending == 0

    def test_no_tick_before_delay(self, controller, scheduler, bst_trace):
        controller.load(bst_trace)
        controller.run(speed=1)
        scheduler.advance(0.5)
        assert controller.cursor == 0
        scheduler.advance(0.5)
        assert controller.cursor == 1

    def test_run_while_playing_is_noop(self, controller, scheduler, bst_trace):
        """A second run does not schedule a second timer."""
        controller.load(bst_trace)
        controller.run()
        controller.run()
        assert scheduler.pending == 1

    def test_run_at_end_is_noop(self, controller, scheduler, bst_trace):
        controller.load(bst_trace)
        controller.to_end()
        controller.run()
        assert not controller.is_playing
        assert scheduler.pending == 0

    def test_run_without_trace(self, controller, scheduler):
        controller.run()
        assert not controller.is_playing

    def test_pause_cancels_timer(self, controller, scheduler, bst_trace):
        controller.load(bst_trace)
        controller.run(speed=10)
        scheduler.advance(0.1)
        controller.pause()
        assert scheduler.pending == 0
        scheduler.run_until_idle()
        assert controller.cursor == 1

    def test_load_stops_playback(self, controller, scheduler, bst_trace):
        controller.load(bst_trace)
        controller.run()
        controller.load(bst_trace)
        assert not controller.is_playing
        assert scheduler.pending == 0

    def test_manual_step_during_play(self, controller, scheduler, bst_trace):
        """Stepping by hand while playing keeps the play going from there."""
        controller.load(bst_trace)
        controller.run(speed=10)
        controller.step_forward()
        scheduler.run_until_idle()
        assert controller.at_end
        assert not controller.is_playing

    @pytest.mark.parametrize("speed", [0, 11])
    def test_speed_limits(self, controller, speed):
        with pytest.raises(ValueError):
            controller.set_speed(speed)

    def test_asyncio_scheduler(self, bst_trace):
        """Autoplay also runs on a real event loop."""
        async def play():
            controller = ReplayController(
                AsyncioScheduler(), ReplayConfig(base_delay=0.01)
            )
            controller.load(bst_trace)
            controller.run(speed=10)
            for _ in range(200):
                if not controller.is_playing:
                    break
                await asyncio.sleep(0.005)
            return controller.cursor

        assert asyncio.run(play()) == 4


# =============================================================================
# Frame Tests
# =============================================================================

class TestFrames:
    def test_empty_controller(self, controller):
        frame = controller.frame()
        assert frame.structure is None
        assert frame.total == 0
        assert frame.at_start and frame.at_end

    def test_initial_frame_describes_operation(self, controller, bst_trace):
        controller.load(bst_trace)
        frame = controller.frame()
        assert frame.description == "insert 20"
        assert frame.kind is None
        assert frame.active == frozenset()

    def test_step_frame(self, controller, bst_trace):
        controller.load(bst_trace)
        controller.step_forward()
        frame = controller.frame()
        assert frame.kind == StepKind.COMPARE
        assert frame.description == "Compare 20 with 50: go left"
        assert len(frame.active) == 1

    def test_subscribe_and_unsubscribe(self, controller, bst_trace):
        frames = []
        unsubscribe = controller.subscribe(frames.append)
        controller.load(bst_trace)
        controller.step_forward()
        unsubscribe()
        controller.step_forward()
        assert [frame.cursor for frame in frames] == [0, 1]

    def test_graph_panels(self, controller, square_graph):
        controller.load(dijkstra(square_graph, "N0"))
        controller.to_end()
        frame = controller.frame()
        assert frame.subject == square_graph
        assert frame.panels["distances"] == {"N0": 0, "N1": 1, "N2": 3, "N3": 4}

    def test_huffman_queue_panel(self, controller, clrs_frequencies):
        controller.load(huffman.build(clrs_frequencies))
        controller.step_forward()
        assert [f for _, f in controller.frame().panels["queue"]] == [5, 9, 12, 13, 16, 45]

    def test_rotation_count_panel(self, controller):
        controller.load(avl.insert_batch(BinaryTree(), [10, 20, 30]))
        controller.to_end()
        assert controller.frame().panels["rotation_count"] == 1
