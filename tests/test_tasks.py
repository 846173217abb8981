"""Tests for tasks.py — keyword parsing."""

import pytest

from circleci_cli.exceptions import TaskParseError
from circleci_cli.tasks import Task


class TestTaskParse:
    @pytest.mark.parametrize(
        "keyword,task",
        [
            ("get_all_pipelines", Task.GET_ALL_PIPELINES),
            ("get_latest_artifacts", Task.GET_LATEST_ARTIFACTS),
            ("get_me", Task.GET_ME),
            ("list_all", Task.LIST_ALL),
            ("trigger", Task.TRIGGER),
        ],
    )
    def test_all_keywords(self, keyword, task):
        assert Task.parse(keyword) is task

    def test_uppercase(self):
        assert Task.parse("TRIGGER") is Task.TRIGGER

    def test_mixed_case(self):
        assert Task.parse("Get_Latest_Artifacts") is Task.GET_LATEST_ARTIFACTS

    def test_unknown_keyword_carries_value(self):
        with pytest.raises(TaskParseError) as exc_info:
            Task.parse("build")
        assert exc_info.value.value == "build"
        assert "build" in str(exc_info.value)

    def test_empty_string_rejected(self):
        with pytest.raises(TaskParseError):
            Task.parse("")

    def test_surrounding_whitespace_rejected(self):
        with pytest.raises(TaskParseError) as exc_info:
            Task.parse(" trigger ")
        assert exc_info.value.value == " trigger "

    def test_hyphenated_form_rejected(self):
        with pytest.raises(TaskParseError):
            Task.parse("get-me")


class TestTaskMisc:
    def test_str_is_keyword(self):
        assert str(Task.LIST_ALL) == "list_all"

    def test_keywords_order(self):
        assert Task.keywords() == [
            "get_all_pipelines",
            "get_latest_artifacts",
            "get_me",
            "list_all",
            "trigger",
        ]
