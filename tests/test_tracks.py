from nwdamage.tracks import OneEvent, OneTrack


def test_track_defaults():
    track = OneTrack()
    assert (track.parent_track_id, track.current_track_id) == (-1, -1)
    assert track.end_process_name == ""
    assert track.particle_name == ""


def test_track_clean_resets():
    track = OneTrack(3, 4, "hadElastic", "neutron")
    track.clean()
    assert track == OneTrack()


def test_event_clean_clears_tracks():
    event = OneEvent(event_id=5)
    event.tracks[1] = OneTrack(0, 1, "hadElastic", "neutron")
    event.clean()
    assert event.event_id == -1
    assert event.tracks == {}


def test_events_do_not_share_tracks():
    first = OneEvent()
    second = OneEvent()
    first.tracks[2] = OneTrack(current_track_id=2)
    assert second.tracks == {}
    assert first.tracks[2].current_track_id == 2