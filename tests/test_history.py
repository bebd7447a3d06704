# ===============================================
# tests/test_history.py
# ===============================================

import pytest

from stacktutor.forge import GeneratedFile, GenerationConfig, GenerationHistory, GenerationResult


def _result(name: str) -> GenerationResult:
    return GenerationResult(files=[GeneratedFile(name, "x")])


def test_most_recent_first_and_bounded():
    hist = GenerationHistory(limit=3)
    for n in range(5):
        hist.add(GenerationConfig(prompt=f"p{n}"), _result(f"{n}.js"))

    assert len(hist) == 3
    assert [i.config.prompt for i in hist.list()] == ["p4", "p3", "p2"]


def test_get_and_clear():
    hist = GenerationHistory()
    item = hist.add(GenerationConfig(prompt="p"), _result("a.js"))

    assert hist.get(item.id) is item
    assert hist.get("missing") is None
    hist.clear()
    assert hist.list() == []


def test_stored_result_is_a_copy():
    hist = GenerationHistory()
    result = _result("a.js")
    item = hist.add(GenerationConfig(prompt="p"), result)
    result.files.append(GeneratedFile("b.js", "y"))
    assert item.result.file_paths == ["a.js"]


def test_item_to_dict():
    item = GenerationHistory().add(GenerationConfig(prompt="p"), _result("a.js"))
    data = item.to_dict()
    assert data["id"] == item.id
    assert data["config"] == {"prompt": "p", "language": "nodejs", "framework": "express", "database": "mongodb"}
    assert data["result"]["files"] == [{"file_path": "a.js", "code": "x"}]
    assert "T" in data["timestamp"]


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        GenerationHistory(limit=0)
