"""Tests for sync orchestration."""

from pathlib import Path

import pytest

from demosync.changes import ChangeSet
from demosync.errors import SyncError, ValidationFailed
from demosync.lint.report import MALFORMED_BLOCK
from demosync.report import github_outputs
from demosync.sync import copy_file, delete_file, smart_merge_file, sync

FIXTURES = Path(__file__).parent / "fixtures"

CARD = "src/components/UserCard.jsx"


@pytest.fixture
def apps(tmp_path, write_tree):
    """Main and demo checkouts sharing a component with protected blocks."""
    main = write_tree(tmp_path / "main-app", {
        CARD: (FIXTURES / "UserCard.main.jsx").read_text(),
        "src/api/users.js": "export const fetchUser = (id) => fetch(`/api/users/${id}`);\n",
        "src/styles/card.css": ".user-card { padding: 8px; }\n",
        "src/utils/format.js": "export const upper = (s) => s.toUpperCase();\n",
    })
    demo = write_tree(tmp_path / "demo-app", {
        CARD: (FIXTURES / "UserCard.demo.jsx").read_text(),
        "src/api/users.js": "export const fetchUser = () => Promise.resolve(mockData);\n",
        "src/styles/card.css": ".user-card { padding: 4px; }\n",
        "src/legacy.js": "export default null;\n",
    })
    return main, demo


def _changes():
    return ChangeSet(
        added=["src/utils/format.js"],
        modified=[CARD, "src/api/users.js", "src/styles/card.css"],
        deleted=["src/legacy.js"],
    )


class TestSync:
    def test_full_run(self, apps, config):
        main, demo = apps
        result = sync(main, demo, config, changes=_changes())

        assert result.passed
        assert (demo / CARD).read_text() == (FIXTURES / "UserCard.merged.jsx").read_text()
        assert (demo / "src/utils/format.js").exists()
        assert not (demo / "src/legacy.js").exists()
        assert (demo / "src/styles/card.css").read_text() == ".user-card { padding: 8px; }\n"

        assert result.preserved == [{"file": CARD, "blocks": 3}]
        assert result.preserved_blocks == 3
        assert result.files_changed == 5
        actions = {entry["file"]: entry["action"] for entry in result.log}
        assert actions == {
            "src/utils/format.js": "added",
            CARD: "smart_merge",
            "src/api/users.js": "smart_merge_no_blocks",
            "src/styles/card.css": "full_copy",
            "src/legacy.js": "deleted",
        }

    def test_file_without_blocks_takes_upstream(self, apps, config):
        main, demo = apps
        sync(main, demo, config, changes=_changes())
        assert "mockData" not in (demo / "src/api/users.js").read_text()

    def test_demo_code_detected(self, apps, config):
        main, demo = apps
        result = sync(main, demo, config, changes=_changes())
        detected = {d["file"]: d for d in result.detected}
        assert detected[CARD]["protected_blocks"] is True
        assert {"category": "disabled_buttons", "pattern": "disabled={true}"} in detected[CARD]["patterns"]
        assert detected["src/api/users.js"]["patterns"] == [
            {"category": "mock_data", "pattern": "mockData"},
        ]

    def test_dry_run_writes_nothing(self, apps, config):
        main, demo = apps
        before = (demo / CARD).read_text()
        result = sync(main, demo, config, changes=_changes(), dry_run=True)
        assert (demo / CARD).read_text() == before
        assert (demo / "src/legacy.js").exists()
        assert not (demo / "src/utils/format.js").exists()
        assert result.preserved_blocks == 3
        assert "[DRY RUN]" in result.summary()

    def test_ignored_files_skipped(self, apps, config):
        main, demo = apps
        config["ignore_patterns"] = ["src/api/**"]
        result = sync(main, demo, config, changes=_changes())
        assert "src/api/users.js" not in result.changes.modified
        assert "mockData" in (demo / "src/api/users.js").read_text()
        ignored = [e for e in result.log if e["action"] == "ignored"]
        assert ignored == [{
            "action": "ignored",
            "file": "src/api/users.js",
            "reason": "Matched pattern: src/api/**",
        }]

    def test_deletions_can_be_disabled(self, apps, config):
        main, demo = apps
        config["advanced"]["sync_deletions"] = False
        sync(main, demo, config, changes=_changes())
        assert (demo / "src/legacy.js").exists()

    def test_malformed_derivative_left_untouched(self, apps, config):
        main, demo = apps
        broken = "// INTENTIONAL-START\nconst demo = true;\n"
        (demo / "src/api/users.js").write_text(broken)
        result = sync(main, demo, config, changes=_changes())

        assert (demo / "src/api/users.js").read_text() == broken
        assert result.conflicts == [{
            "file": "src/api/users.js",
            "line": 1,
            "reason": "1 unclosed protected block(s) - missing end marker",
        }]

    def test_malformed_derivative_is_validation_error(self, apps, config):
        main, demo = apps
        (demo / "src/api/users.js").write_text("a\n// INTENTIONAL-START\nP\nc\n")
        result = sync(main, demo, config, changes=_changes())

        assert not result.passed
        (issue,) = result.validation.errors
        assert issue.file == "src/api/users.js"
        assert issue.type == MALFORMED_BLOCK
        assert issue.line == 2
        assert github_outputs(result)["has_errors"] == "true"

    def test_malformed_derivative_fails_on_error(self, apps, config):
        main, demo = apps
        (demo / "src/api/users.js").write_text("a\n// INTENTIONAL-START\nP\nc\n")
        config["validation"]["fail_on_error"] = True
        with pytest.raises(ValidationFailed) as exc:
            sync(main, demo, config, changes=_changes())
        assert "src/api/users.js:2" in exc.value.errors[0]
        assert exc.value.result.conflicts

    def test_unanchored_block_recorded(self, tmp_path, config, write_tree):
        main = write_tree(tmp_path / "main", {"src/App.jsx": "rewritten\n"})
        demo = write_tree(tmp_path / "demo", {
            "src/App.jsx": "old\n// INTENTIONAL-START\ndemo();\n// INTENTIONAL-END\n",
        })
        result = sync(main, demo, config, changes=ChangeSet(modified=["src/App.jsx"]))

        (warning,) = result.merge_warnings
        assert warning["file"] == "src/App.jsx"
        assert warning["kind"] == "context_missing"
        assert (warning["start_line"], warning["end_line"]) == (2, 4)
        text = (demo / "src/App.jsx").read_text()
        assert text.startswith("rewritten\n// SYNC-WARNING")
        assert "demo();" in text

    def test_missing_upstream_file_collected(self, apps, config):
        main, demo = apps
        result = sync(main, demo, config, changes=ChangeSet(added=["src/ghost.js"]))
        assert not result.passed
        assert result.errors[0]["path"].endswith("ghost.js")

    def test_validation_runs_on_outputs(self, tmp_path, config, write_tree):
        main = write_tree(tmp_path / "main", {
            "src/bad.js": "import x from '../../main-app/src/x';\n",
        })
        demo = write_tree(tmp_path / "demo", {})
        result = sync(main, demo, config, changes=ChangeSet(added=["src/bad.js"]))
        assert result.validation.files_checked == 1
        assert len(result.validation.errors) == 1
        assert result.passed

    def test_fail_on_error_raises(self, tmp_path, config, write_tree):
        main = write_tree(tmp_path / "main", {
            "src/bad.js": "import x from '../../main-app/src/x';\n",
        })
        demo = write_tree(tmp_path / "demo", {})
        config["validation"]["fail_on_error"] = True
        with pytest.raises(ValidationFailed) as exc:
            sync(main, demo, config, changes=ChangeSet(added=["src/bad.js"]))
        assert exc.value.result is not None
        assert "main-app" in exc.value.errors[0]

    def test_git_detection_failure(self, tmp_path, config):
        with pytest.raises(SyncError):
            sync(tmp_path / "not-a-repo", tmp_path / "demo", config)

    def test_to_dict(self, apps, config):
        main, demo = apps
        data = sync(main, demo, config, changes=_changes()).to_dict()
        assert data["success"] is True
        assert data["changes"]["deleted"] == ["src/legacy.js"]
        assert data["validation"]["summary"]["files_checked"] == 4
        assert set(data) >= {"preserved", "conflicts", "merge_warnings", "sync_log", "errors"}


class TestFileOperations:
    def test_smart_merge_without_derivative_copies(self, tmp_path, config, write_tree):
        main = write_tree(tmp_path / "main", {"src/New.jsx": "new\n"})
        demo = tmp_path / "demo"
        outcome = smart_merge_file("src/New.jsx", main, demo, config)
        assert outcome["action"] == "copied"
        assert (demo / "src/New.jsx").read_text() == "new\n"

    def test_copy_binary_file(self, tmp_path):
        main = tmp_path / "main"
        (main / "src").mkdir(parents=True)
        (main / "src/logo.png").write_bytes(b"\x89PNG\xff\x00")
        assert copy_file("src/logo.png", main, tmp_path / "demo") is None
        assert (tmp_path / "demo/src/logo.png").read_bytes() == b"\x89PNG\xff\x00"

    def test_delete_missing_file(self, tmp_path):
        assert delete_file("src/none.js", tmp_path) is False
