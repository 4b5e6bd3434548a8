import pytest

from conftest import FailingCompleter, ScriptedCompleter
from vita.src.core.errors import ProviderError
from vita.src.core.runner import ChatRunner, RunnerState


def test_successful_invocations_append_two_turns_each(registry):
    runner = ChatRunner(ScriptedCompleter("a1", "a2", "a3"), registry)

    for i in range(1, 4):
        assert runner.invoke("1", f"q{i}", "ctx") == f"a{i}"

    turns = registry.get("1").turns
    assert len(turns) == 6
    assert [t.role for t in turns] == ["user", "assistant"] * 3
    assert [t.text for t in turns] == ["q1", "a1", "q2", "a2", "q3", "a3"]


def test_history_is_sent_on_the_next_call(registry):
    completer = ScriptedCompleter("a1", "a2")
    runner = ChatRunner(completer, registry)

    runner.invoke("1", "q1", "ctx")
    runner.invoke("1", "q2", "ctx")

    second_prompt = completer.calls[1]
    assert [(m.role, m.content) for m in second_prompt[1:]] == [("user", "q1"), ("assistant", "a1"), ("user", "q2")]


def test_failed_completion_leaves_history_unchanged(registry):
    runner = ChatRunner(ScriptedCompleter("a1"), registry)
    runner.invoke("1", "q1", "ctx")
    before = registry.get("1").turns

    failing = ChatRunner(FailingCompleter(), registry)
    with pytest.raises(ProviderError):
        failing.invoke("1", "q2", "ctx")

    assert registry.get("1").turns == before
    assert failing.state is RunnerState.IDLE


def test_state_is_awaiting_model_during_the_call(registry):
    seen = []

    class Probe:
        def complete(self, messages):
            seen.append(runner.state)
            return "ok"

    runner = ChatRunner(Probe(), registry)
    assert runner.state is RunnerState.IDLE

    runner.invoke("1", "q", "ctx")

    assert seen == [RunnerState.AWAITING_MODEL]
    assert runner.state is RunnerState.IDLE


def test_history_window_limits_prompt_but_not_log(registry):
    completer = ScriptedCompleter("a1", "a2", "a3")
    runner = ChatRunner(completer, registry, history_window=2)

    runner.invoke("1", "q1", "ctx")
    runner.invoke("1", "q2", "ctx")
    runner.invoke("1", "q3", "ctx")

    assert [m.content for m in completer.calls[2][1:]] == ["q2", "a2", "q3"]
    assert len(registry.get("1")) == 6


def test_default_registry_is_created(echo):
    runner = ChatRunner(echo)

    runner.invoke("s", "hi", "ctx")

    assert len(runner.registry.get("s")) == 2
