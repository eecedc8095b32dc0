"""
Tests de l'outil opérateur `backend.scripts.delete_profile`.

Vérifie les codes de sortie (0 succès/abandon, 1 échec, 2 argument manquant), l'invite de
confirmation et la construction de la configuration depuis les options.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend.scripts import delete_profile as cli
from tests.fakes import seed_profile


def _answer(monkeypatch, value: str) -> list[str]:
    asked: list[str] = []

    def fake_input(prompt: str) -> str:
        asked.append(prompt)
        return value

    monkeypatch.setattr("builtins.input", fake_input)
    return asked


def test_missing_profile_id_exits_2(container) -> None:
    assert cli.main([], container=container) == cli.EXIT_USAGE


@pytest.mark.parametrize("answer", ["y", "yes", " YES ", "Y"])
def test_confirmed_deletion(monkeypatch, container, store, answer) -> None:
    seed_profile(store, "alice", authUid="someone-else", followers=["bob"])
    seed_profile(store, "bob", likes=["alice"])
    asked = _answer(monkeypatch, answer)

    code = cli.main(["--profileId", "alice"], container=container)

    assert code == cli.EXIT_OK
    assert asked == ["Proceed with deletion? (y/N): "]
    # l'opérateur n'est pas soumis au contrôle de propriété
    assert not store.exists("profiles", "alice")
    assert not store.exists("profiles/bob/likes", "alice")


@pytest.mark.parametrize("answer", ["", "n", "no", "yess"])
def test_aborted_by_user(monkeypatch, container, store, answer) -> None:
    seed_profile(store, "alice")
    _answer(monkeypatch, answer)

    assert cli.main(["-p", "alice"], container=container) == cli.EXIT_OK
    assert store.exists("profiles", "alice")
    assert store.stats.delete_calls == 0


def test_eof_on_prompt_aborts(monkeypatch, container, store) -> None:
    seed_profile(store, "alice")

    def eof(prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    assert cli.main(["-p", "alice"], container=container) == cli.EXIT_OK
    assert store.exists("profiles", "alice")


def test_yes_flag_skips_prompt_and_uses_beacon(monkeypatch, container, store) -> None:
    seed_profile(store, "alice")
    store.set("streetpass_presences", "p1", {"beaconId": "B1"})
    asked = _answer(monkeypatch, "n")

    code = cli.main(["--profileId=alice", "--beaconId=B1", "--yes"], container=container)

    assert code == cli.EXIT_OK
    assert asked == []
    assert not store.exists("streetpass_presences", "p1")


def test_failure_exits_1(monkeypatch, container, store) -> None:
    seed_profile(store, "alice")
    store.fail("delete", "profiles", "alice")
    _answer(monkeypatch, "y")

    assert cli.main(["-p", "alice"], container=container) == cli.EXIT_FAILED
    assert store.exists("profiles", "alice")


def test_cli_run_is_audited(monkeypatch, container, store, settings) -> None:
    monkeypatch.setenv("PURGE_ACTOR", "ops-oncall")
    seed_profile(store, "alice")

    cli.main(["-p", "alice", "-y"], container=container)

    line = (Path(settings.AUDIT_DIR) / "profile_deletion.log").read_text("utf-8").strip()
    rec = json.loads(line)
    assert rec["actor"] == "ops-oncall"
    assert rec["entrypoint"] == "cli"
    assert rec["status"] == "success"


def test_options_override_settings(monkeypatch, settings) -> None:
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    args = cli.build_parser().parse_args(
        ["-p", "alice", "--projectId", "demo-project", "--batch-size", "50"]
    )

    container = cli._make_container(args)

    assert container.settings.FIRESTORE_PROJECT_ID == "demo-project"
    assert container.settings.PURGE_BATCH_SIZE == 50
    assert Path(container.script_dir).name == "scripts"


@pytest.mark.parametrize("size", ["0", "-3", "501"])
def test_invalid_batch_size_exits_2(container, store, size) -> None:
    seed_profile(store, "alice")

    code = cli.main(["-p", "alice", "-y", "--batch-size", size], container=container)

    assert code == cli.EXIT_USAGE
    assert store.exists("profiles", "alice")


def test_unexpected_exception_exits_1(container, store, settings) -> None:
    seed_profile(store, "alice")
    store.fail("get", "profiles", "alice", error=RuntimeError("boom"))

    assert cli.main(["-p", "alice", "-y"], container=container) == cli.EXIT_FAILED
    rec = json.loads((Path(settings.AUDIT_DIR) / "profile_deletion.log").read_text("utf-8"))
    assert rec["error"] == "internal"
