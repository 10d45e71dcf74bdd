import pytest
from conftest import make_pr

from tagnotes import main as main_module
from tagnotes.categories import InvalidConfiguration
from tagnotes.config import MissingInputError, Settings
from tagnotes.main import generate_release_notes


@pytest.fixture
def populated_client(fake_client):
    fake_client.tags = ["v1.1.0", "v1.0.0"]
    fake_client.commits = ["c1"]
    fake_client.prs_by_sha = {"c1": [make_pr(10, "feat: add api")]}
    return fake_client


def _settings(**overrides):
    values = {"repository": "owner/repo", "token": "token", "ref": "refs/tags/v1.1.0"}
    values.update(overrides)
    return Settings(**values)


def test_dry_run_outputs_body_without_publishing(populated_client, tmp_path, monkeypatch):
    output = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))

    body = generate_release_notes(_settings(dry_run=True), client=populated_client)

    assert body == "## Features\n- add api (#10)"
    assert "release-body<<" in output.read_text(encoding="utf-8")
    assert "- add api (#10)" in output.read_text(encoding="utf-8")
    assert not populated_client.called("get_release_by_tag")
    assert not populated_client.called("create_release")
    assert not populated_client.called("update_release")


def test_updates_existing_release(populated_client):
    populated_client.release = {"id": 7}

    body = generate_release_notes(_settings(), client=populated_client)

    assert populated_client.called("update_release") == [("update_release", 7, "v1.1.0", body, True)]
    assert not populated_client.called("create_release")


def test_creates_release_when_none_exists(populated_client):
    body = generate_release_notes(_settings(), client=populated_client)

    assert populated_client.called("create_release") == [("create_release", "v1.1.0", "v1.1.0", body, True)]


def test_uses_override_base_and_head(populated_client):
    generate_release_notes(_settings(base="custom-base", head="custom-head", dry_run=True), client=populated_client)

    assert populated_client.called("compare_commits") == [("compare_commits", "custom-base", "custom-head")]


def test_explicit_tag_wins_over_ref(populated_client):
    populated_client.tags = ["v2.0.0", "v1.1.0", "v1.0.0"]

    body = generate_release_notes(
        _settings(tag="v2.0.0", template="{{tag}} <- {{previousTag}}", dry_run=True), client=populated_client
    )

    assert body == "v2.0.0 <- v1.1.0"
    assert populated_client.called("compare_commits") == [("compare_commits", "v1.1.0", "v2.0.0")]


def test_first_release_compares_from_root_commit(fake_client):
    fake_client.tags = ["v0.1.0"]
    fake_client.history = ["c2", "c1"]
    fake_client.commits = ["c2"]
    fake_client.prs_by_sha = {"c2": [make_pr(1, "fix(core): first fix")]}

    body = generate_release_notes(
        _settings(ref="refs/tags/v0.1.0", template="since [{{previousTag}}]\n{{sections}}", heading_level=3),
        client=fake_client,
    )

    assert fake_client.called("compare_commits") == [("compare_commits", "c1", "v0.1.0")]
    assert body == "since []\n### Fixes\n- first fix (#1)"


def test_first_release_includes_prs_on_root_commit(fake_client):
    fake_client.tags = ["v0.1.0"]
    fake_client.history = ["c2", "c1"]
    fake_client.commits = ["c1", "c2"]
    fake_client.prs_by_sha = {
        "c1": [make_pr(1, "feat: initial import")],
        "c2": [make_pr(2, "fix: typo")],
    }

    body = generate_release_notes(_settings(ref="refs/tags/v0.1.0", dry_run=True), client=fake_client)

    assert body == "## Features\n- initial import (#1)\n\n## Fixes\n- typo (#2)"
    shas = [call[1] for call in fake_client.called("list_pull_requests_for_commit")]
    assert shas == ["c1", "c2"]


def test_later_release_does_not_scan_previous_tag_commit(populated_client):
    populated_client.commits = ["v1.0.0", "c1"]
    populated_client.prs_by_sha["v1.0.0"] = [make_pr(9, "feat: already released")]

    body = generate_release_notes(_settings(dry_run=True), client=populated_client)

    assert "(#9)" not in body


def test_category_map_override_is_applied(populated_client):
    populated_client.prs_by_sha = {"c1": [make_pr(10, "perf: faster")]}

    body = generate_release_notes(
        _settings(category_map='{"perf": "Speed"}', dry_run=True), client=populated_client
    )

    assert body == "## Speed\n- faster (#10)"


def test_empty_range_renders_empty_message(populated_client):
    populated_client.prs_by_sha = {}

    body = generate_release_notes(_settings(empty_message="Nothing to see.", dry_run=True), client=populated_client)

    assert body == "Nothing to see."


def test_invalid_category_map_fails_before_network(fake_client):
    with pytest.raises(InvalidConfiguration):
        generate_release_notes(_settings(category_map="not json"), client=fake_client)

    assert fake_client.calls == []


def test_missing_tag_fails_before_network(fake_client):
    with pytest.raises(MissingInputError):
        generate_release_notes(_settings(ref="refs/heads/main"), client=fake_client)

    assert fake_client.calls == []


def test_main_exits_nonzero_on_failure(monkeypatch):
    monkeypatch.setenv("GITHUB_REPOSITORY", "owner/repo")

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--category-map", "not json"])

    assert excinfo.value.code == 1


def test_main_prints_body_in_dry_run(monkeypatch, capsys):
    captured_settings = []

    def fake_generate(settings, client=None):
        captured_settings.append(settings)
        return "## Features\n- add api (#10)"

    monkeypatch.setattr(main_module, "generate_release_notes", fake_generate)

    main_module.main(["--repository", "owner/repo", "--tag", "v1.1.0", "--dry-run"])

    assert capsys.readouterr().out == "## Features\n- add api (#10)\n"
    assert captured_settings[0].tag == "v1.1.0"
    assert captured_settings[0].dry_run is True
