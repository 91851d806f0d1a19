"""
CLI Tests
=========
Command-line behaviour via click's CliRunner.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from exam_parser.cli import cli


BANK_TEXT = """单选题
1. 中国的首都是哪里？
A. 上海
B. 北京
正确答案：B
判断题
2. 地球是圆的。
正确答案：Y
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def bank_file(tmp_path):
    path = tmp_path / "bank.txt"
    path.write_text(BANK_TEXT, encoding="utf-8")
    return path


class TestParseCommand:
    """Test the parse command."""

    def test_json_output(self, runner, bank_file):
        result = runner.invoke(cli, ["parse", str(bank_file), "--json-output"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["question_count"] == 2
        assert [q["type"] for q in data["questions"]] == ["single", "judge"]
        assert data["warnings"] == [
            "Question 2: auto-added standard options for judge question"
        ]

    def test_existing_bank_seeds_ids(self, runner, bank_file, tmp_path):
        existing = tmp_path / "existing.json"
        existing.write_text(json.dumps({"questions": [
            {"id": 9, "type": "single", "question": "q",
             "options": ["A.x"], "answer": ["A"]},
        ]}), encoding="utf-8")

        result = runner.invoke(cli, [
            "parse", str(bank_file), "--existing", str(existing), "--json-output",
        ])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [q["id"] for q in data["questions"]] == [10, 11]

    def test_default_type_option(self, runner, tmp_path):
        path = tmp_path / "plain.txt"
        path.write_text("1. 题干\nA. 甲\nB. 乙\n答案：A\n", encoding="utf-8")

        result = runner.invoke(cli, [
            "parse", str(path), "--type", "single", "--json-output",
        ])

        data = json.loads(result.stdout)
        assert data["questions"][0]["type"] == "single"

    def test_output_file(self, runner, bank_file, tmp_path):
        out = tmp_path / "out" / "result.json"

        result = runner.invoke(cli, ["parse", str(bank_file), "-o", str(out)])

        assert result.exit_code == 0
        saved = json.loads(out.read_text(encoding="utf-8"))
        assert saved["question_count"] == 2
        assert "Parse Summary" in result.output

    def test_no_questions_exits_nonzero(self, runner, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("没有任何题目\n", encoding="utf-8")

        result = runner.invoke(cli, ["parse", str(path), "--json-output"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["questions"] == []
        assert len(data["errors"]) == 1


class TestValidateCommand:
    """Test the validate command."""

    def test_valid_bank(self, runner, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps([
            {"id": 1, "type": "judge", "question": "地球是圆的",
             "options": ["A.正确", "B.错误"], "answer": ["A"]},
        ], ensure_ascii=False), encoding="utf-8")

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 0
        assert "All questions are valid" in result.output

    def test_invalid_answer_reported(self, runner, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps([
            {"id": 4, "type": "single", "question": "题干",
             "options": ["A.甲", "B.乙"], "answer": ["E"]},
        ], ensure_ascii=False), encoding="utf-8")

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 1
        assert "invalid option" in result.output

    def test_strict_labels(self, runner, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps([
            {"id": 1, "type": "single", "question": "题干",
             "options": ["A.甲", "A.乙"], "answer": ["A"]},
        ], ensure_ascii=False), encoding="utf-8")

        assert runner.invoke(cli, ["validate", str(path)]).exit_code == 0
        strict = runner.invoke(cli, ["validate", str(path), "--strict-labels"])
        assert strict.exit_code == 1
        assert "duplicate option" in strict.output
