LOOKAHEAD_TICKS = 30


def policy(env):
    # Strategy: find the obstacle that will reach the collision band soonest while
    # overlapping the player's span (padded by one step), then sidestep it on whichever
    # side needs the shorter move and still fits inside the field. With nothing
    # threatening, drift back to the centre so both escape routes stay open.
    engine = env.engine
    cfg = engine.config
    px = engine.state.player_x
    band_top, band_bottom = cfg.collision_band
    pad = cfg.player_speed

    threat = None
    threat_eta = None
    for obs in engine.state.obstacles:
        if obs.y >= band_bottom:
            continue
        if obs.right <= px - pad or obs.x >= px + cfg.player_width + pad:
            continue
        gap = band_top - obs.bottom
        eta = 0.0 if gap <= 0 else gap / max(obs.speed, 1e-6)
        if eta > LOOKAHEAD_TICKS:
            continue
        if threat_eta is None or eta < threat_eta:
            threat, threat_eta = obs, eta

    if threat is None:
        centre = cfg.max_player_x / 2
        if px < centre - cfg.player_speed:
            return [0, 1]
        if px > centre + cfg.player_speed:
            return [1, 0]
        return [0, 0]

    need_left = px + cfg.player_width - threat.x
    need_right = threat.right - px
    can_left = px - need_left >= 0
    can_right = px + need_right <= cfg.max_player_x

    if can_left and (not can_right or need_left <= need_right):
        return [1, 0]
    if can_right:
        return [0, 1]
    # Cornered: head for whichever wall has more room.
    return [1, 0] if px > cfg.max_player_x - px else [0, 1]
