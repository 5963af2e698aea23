from assembly_sync.tokens import DEFAULT_LEAD_TIME_MILLIS, AccessWindow, TokenManager


def test_access_window_counts_down(clock):
    window = AccessWindow(5_000, clock=clock)
    assert window.remaining() == 5_000
    assert not window.is_expired()

    clock.advance(4)
    assert window.remaining() == 1_000

    clock.advance(1)
    assert window.remaining() == 0
    assert window.is_expired()

    clock.advance(2)
    assert window.remaining() == -2_000


def test_access_window_negative_duration_is_already_expired(clock):
    window = AccessWindow(-1, clock=clock)
    assert window.is_expired()


def test_access_window_reset_moves_expiry(clock):
    window = AccessWindow(1_000, clock=clock)
    clock.advance(5)
    assert window.is_expired()
    window.reset(10_000)
    assert window.remaining() == 10_000
    assert window.expires_at_millis == int(clock.now * 1000) + 10_000


def test_token_manager_defaults(clock):
    manager = TokenManager("access", "refresh", 120_000, clock=clock)
    assert manager.access_token == "access"
    assert manager.refresh_token == "refresh"
    assert manager.lead_time_millis == DEFAULT_LEAD_TIME_MILLIS == 60_000


def test_refresh_required_respects_lead_time(clock):
    manager = TokenManager("access", "refresh", 120_000, clock=clock)
    assert not manager.refresh_required()

    clock.advance(59)
    assert not manager.refresh_required()

    clock.advance(1)
    # remaining == lead time
    assert manager.refresh_required()


def test_short_validity_requires_refresh_immediately(clock):
    manager = TokenManager("access", "refresh", 10_000, clock=clock)
    assert manager.refresh_required()


def test_mutators_update_state(clock):
    manager = TokenManager("access", "refresh", 10_000, clock=clock)
    manager.set_lead_time(0)
    assert not manager.refresh_required()

    clock.advance(20)
    assert manager.refresh_required()

    manager.set_expiration(30_000)
    manager.set_access_token("access-2")
    manager.set_refresh_token("refresh-2")
    assert manager.remaining() == 30_000
    assert not manager.refresh_required()
    assert manager.access_token == "access-2"
    assert manager.refresh_token == "refresh-2"
