import pytest

from power_ratings.jobs import update_elo
from power_ratings.sports import enabled_sports


def ok_result(sports, workers=1):
    return {
        "ok": True,
        "results": {s: {"sport": s, "games": 4, "teams": 3, "updated": 2,
                        "top_teams": [{"team": "KC", "elo": 1525}]} for s in sports},
        "failed": {},
    }


@pytest.fixture
def job(monkeypatch):
    monkeypatch.setattr(update_elo, "init_db", lambda: None)
    monkeypatch.delenv("ELO_SPORTS", raising=False)
    monkeypatch.delenv("ELO_WORKERS", raising=False)
    return update_elo


def test_enabled_sports(monkeypatch):
    monkeypatch.delenv("ELO_SPORTS", raising=False)
    assert enabled_sports() == ["nfl", "nba", "mlb", "nhl", "ncaaf", "ncaab"]

    monkeypatch.setenv("ELO_SPORTS", " NBA, nhl ,")
    assert enabled_sports() == ["nba", "nhl"]


def test_job_runs_enabled_sports(job, monkeypatch):
    calls = []

    def fake(sports, workers=1):
        calls.append((sports, workers))
        return ok_result(sports)

    monkeypatch.setenv("ELO_SPORTS", "nfl,nba")
    monkeypatch.setenv("ELO_WORKERS", "2")
    monkeypatch.setattr(job, "recompute_all", fake)

    job.main()
    assert calls == [(["nfl", "nba"], 2)]


def test_job_exits_nonzero_on_failure(job, monkeypatch):
    def fake(sports, workers=1):
        return {"ok": False, "results": {}, "failed": {"nfl": "db down"}}

    monkeypatch.setattr(job, "recompute_all", fake)
    with pytest.raises(SystemExit) as exc:
        job.main()
    assert exc.value.code == 1


def test_job_rejects_bad_sport_list(job, monkeypatch):
    monkeypatch.setenv("ELO_SPORTS", "nfl,curling")
    with pytest.raises(SystemExit) as exc:
        job.main()
    assert exc.value.code == 2
