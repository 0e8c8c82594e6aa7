"""Tests for the load-once dashboard context."""

import threading
from unittest.mock import patch

import pandas as pd
import pytest

from covid_dashboard import data_manager
from covid_dashboard.data_manager import build_context, load_context
from covid_dashboard.exceptions import DataSourceUnavailable


class TestBuildContext:

    def test_derived_options(self, context, table):
        assert context.table is table
        assert context.countries == ("Canada", "France", "United States")
        assert context.date_min == pd.Timestamp("2021-01-01")
        assert context.date_max == pd.Timestamp("2021-01-03")

    def test_context_is_frozen(self, context):
        with pytest.raises(AttributeError):
            context.countries = ()

    def test_filter_returns_copy(self, context, table):
        before = table.copy()

        result = context.filter(countries=["Canada"])
        result["total_cases"] = 0

        assert len(result) == 2
        pd.testing.assert_frame_equal(context.table, before)


class TestLoadContext:

    def test_fetches_once(self, table):
        with patch.object(data_manager.pipeline, "get_data", return_value=table) as get_data:
            first = load_context()
            second = load_context()

        assert first is second
        get_data.assert_called_once()

    def test_force_reload_fetches_again(self, table):
        with patch.object(data_manager.pipeline, "get_data", return_value=table) as get_data:
            first = load_context()
            second = load_context(force_reload=True)

        assert first is not second
        assert get_data.call_count == 2

    def test_concurrent_callers_fetch_once(self, table):
        results = []

        with patch.object(data_manager.pipeline, "get_data", return_value=table) as get_data:
            threads = [
                threading.Thread(target=lambda: results.append(load_context()))
                for _ in range(8)
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        get_data.assert_called_once()
        assert len({id(ctx) for ctx in results}) == 1

    def test_failure_leaves_nothing_loaded(self, table):
        with patch.object(
            data_manager.pipeline, "get_data", side_effect=DataSourceUnavailable("x")
        ):
            with pytest.raises(DataSourceUnavailable):
                load_context()

        with patch.object(data_manager.pipeline, "get_data", return_value=table) as get_data:
            load_context()

        get_data.assert_called_once()


class TestContextFilter:

    def test_single_country_string(self, context):
        assert list(context.filter(countries="France")["location"]) == ["France"]
