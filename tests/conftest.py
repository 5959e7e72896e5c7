import pytest

from core.tree import ROOT_ID, SNIPPET, SEPARATOR, FOLDER, TAB, Item, ItemStore


class Prompt:
    """Answers prompts from a list; None in the list means Cancel."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.calls = []

    def __call__(self, label, default=None):
        self.calls.append((label, default))
        return self.answers.pop(0)


class FakeScheduler:
    """schedule(delay_ms, fn) -> cancel, fired by hand."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay_ms, fn):
        entry = {"delay": delay_ms, "fn": fn, "live": True}
        self.pending.append(entry)

        def cancel():
            entry["live"] = False
        return cancel

    def fire_all(self):
        pending, self.pending = self.pending, []
        for entry in pending:
            if entry["live"]:
                entry["fn"]()


@pytest.fixture
def prompt():
    return Prompt


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def store():
    """
    Work (tab)
      Git (folder, expanded)
        Status
        Deep (folder)
          Tag release
    List files      (root)
    ---             (root)
    Ops (tab)
    """
    return ItemStore([
        Item("t1", "Work", TAB),
        Item("f1", "Git", FOLDER, parent_id="t1", expanded=True),
        Item("s1", "Status", SNIPPET, command="git status", parent_id="f1"),
        Item("f2", "Deep", FOLDER, parent_id="f1"),
        Item("s2", "Tag release", SNIPPET, command="git tag {{arg$1:Version}}", parent_id="f2"),
        Item("s3", "List files", SNIPPET, command="ls -la", description="directory listing"),
        Item("sep", "---", SEPARATOR, parent_id=ROOT_ID),
        Item("t2", "Ops", TAB),
    ])
