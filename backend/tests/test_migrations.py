"""
Checks over the Alembic revision files in DB/
"""
import importlib.util
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest


DB_DIR = Path(__file__).resolve().parents[2] / "DB"


def _load(path: Path):
    spec = importlib.util.spec_from_file_location(f"revision_{path.stem}", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def revisions():
    return {m.revision: m for m in (_load(p) for p in sorted(DB_DIR.glob("*.py")))}


def test_revisions_form_a_single_chain(revisions):
    roots = [r for r, m in revisions.items() if m.down_revision is None]
    assert len(roots) == 1

    children = {m.down_revision: r for r, m in revisions.items() if m.down_revision is not None}
    assert len(children) == len(revisions) - 1

    chain = [roots[0]]
    while chain[-1] in children:
        chain.append(children[chain[-1]])
    assert len(chain) == len(revisions)


def test_every_revision_is_reversible(revisions):
    for module in revisions.values():
        assert callable(module.upgrade)
        assert callable(module.downgrade)


def _collapse_revision(revisions):
    matches = [m for m in revisions.values() if getattr(m, "LEGACY_STAGE", None) == "interviewing"]
    assert len(matches) == 1
    return matches[0]


def test_collapse_maps_interviewing_to_first_round(revisions):
    module = _collapse_revision(revisions)
    op = MagicMock()

    with patch.object(module, "op", op):
        module.upgrade()

    statements = [c.args[0] for c in op.execute.call_args_list]
    assert len(statements) == 3
    assert all("'interview_round_1'" in s and "'interviewing'" in s for s in statements)
    assert "milestone = 'interviewing'" in statements[0]
    assert any("from_stage" in s for s in statements)
    assert any("to_stage" in s for s in statements)


def test_lifecycle_tables_created(revisions):
    root = next(m for m in revisions.values() if m.down_revision is None)
    op = MagicMock()

    with patch.object(root, "op", op):
        root.upgrade()

    tables = [c.args[0] for c in op.create_table.call_args_list]
    assert tables == ["applications", "stage_history", "interview_rounds", "conversations"]
