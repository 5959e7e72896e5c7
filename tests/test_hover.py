from core.hover import FOLDER_EXPAND_DELAY_MS, HoverIntent


def make(scheduler):
    fired = []
    return HoverIntent(FOLDER_EXPAND_DELAY_MS, scheduler, fired.append), fired


def test_fires_once_after_delay(scheduler):
    intent, fired = make(scheduler)
    intent.hover("f1")
    assert scheduler.pending[0]["delay"] == FOLDER_EXPAND_DELAY_MS
    assert fired == []
    scheduler.fire_all()
    assert fired == ["f1"]
    assert intent.target is None


def test_hovering_same_target_keeps_timer(scheduler):
    intent, fired = make(scheduler)
    intent.hover("f1")
    intent.hover("f1")
    assert len(scheduler.pending) == 1


def test_new_target_restarts(scheduler):
    intent, fired = make(scheduler)
    intent.hover("f1")
    intent.hover("f2")
    scheduler.fire_all()
    assert fired == ["f2"]


def test_leave_cancels_only_its_target(scheduler):
    intent, fired = make(scheduler)
    intent.hover("f1")
    intent.leave("f2")
    assert intent.target == "f1"
    intent.leave("f1")
    scheduler.fire_all()
    assert fired == []


def test_stale_timer_is_ignored(scheduler):
    intent, fired = make(scheduler)
    intent.hover("f1")
    stale = scheduler.pending[0]["fn"]
    intent.hover("f2")
    stale()
    assert fired == []
    assert intent.target == "f2"
