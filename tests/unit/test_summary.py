"""
Unit Tests for the Dataset Summary
"""
import pandas as pd
import pytest

from heartrisk.core.dataset.summary import NoValidRowsError, summarize_csv, summarize_table


@pytest.fixture
def reference_frame() -> pd.DataFrame:
    return pd.DataFrame({
        "Age": [70, 67, 57, 64],
        "Sex": [1, 0, 1, 1],
        "Chest pain type": [4, 3, 2, 4],
        "BP": [130, 115, 124, 128],
        "Cholesterol": [322, 564, 261, 263],
        "Max HR": [109, 160, 141, 105],
        "Exercise angina": [0, 0, 0, 1],
        "Heart Disease": ["Presence", "Absence", "Presence", "Absence"],
    })


class TestSummarizeTable:
    """Tests for summarize_table."""

    def test_counts_and_averages(self, reference_frame):
        summary = summarize_table(reference_frame)

        assert summary.total_rows == 4
        assert summary.valid_rows == 4
        assert summary.presence_count == 2
        assert summary.absence_count == 2
        assert summary.averages["age"] == pytest.approx(64.5)
        assert summary.averages["bp"] == pytest.approx(124.25)
        assert summary.averages["max_hr"] == pytest.approx(128.75)
        assert summary.male_share == pytest.approx(0.75)
        assert summary.exercise_angina_share == pytest.approx(0.25)

    def test_chest_pain_distribution(self, reference_frame):
        summary = summarize_table(reference_frame)
        assert summary.chest_pain_distribution == {
            "typical": 0,
            "atypical": 25,
            "non-anginal": 25,
            "asymptomatic": 50,
        }

    def test_invalid_rows_dropped(self, reference_frame):
        reference_frame["Cholesterol"] = reference_frame["Cholesterol"].astype(object)
        reference_frame.loc[1, "Cholesterol"] = "missing"
        summary = summarize_table(reference_frame)

        assert summary.total_rows == 4
        assert summary.valid_rows == 3
        assert summary.absence_count == 1
        assert summary.averages["cholesterol"] == pytest.approx((322 + 261 + 263) / 3)

    def test_uci_short_names(self):
        df = pd.DataFrame({
            "age": [50, 60, 70],
            "sex": ["male", "female", "Male"],
            "cp": [1, 1, 4],
            "trestbps": [120, 140, 160],
            "chol": [200, 250, 300],
            "thalach": [150, 140, 130],
            "exang": ["yes", "no", "no"],
            "target": [1, 0, 1],
        })
        summary = summarize_table(df)

        assert summary.presence_count == 2
        assert summary.absence_count == 1
        assert summary.male_share == pytest.approx(2 / 3)
        assert summary.exercise_angina_share == pytest.approx(1 / 3)
        # 2/3 -> 66.67% rounds to 67, 1/3 -> 33
        assert summary.chest_pain_distribution["typical"] == 67
        assert summary.chest_pain_distribution["asymptomatic"] == 33

    def test_no_valid_rows(self):
        df = pd.DataFrame({"name": ["a", "b"], "score": [1, 2]})
        with pytest.raises(NoValidRowsError) as exc_info:
            summarize_table(df)
        assert exc_info.value.columns == ["name", "score"]
        assert "Found columns: name, score" in str(exc_info.value)

    def test_to_dict_rounds(self, reference_frame):
        d = summarize_table(reference_frame).to_dict()
        assert d["averages"]["bp"] == 124.2 or d["averages"]["bp"] == 124.3
        assert d["male_share"] == 0.75


class TestSummarizeCsv:
    """Tests for parsing uploaded bytes."""

    def test_bytes(self):
        content = (
            b"Age,Sex,Chest pain type,BP,Cholesterol,Max HR,Exercise angina,Heart Disease\n"
            b"70,1,4,130,322,109,0,Presence\n"
            b"\n"
            b"67,0,3,115,564,160,0,Absence\n"
        )
        summary = summarize_csv(content)
        assert summary.total_rows == 2
        assert summary.presence_count == 1
        assert summary.averages["cholesterol"] == pytest.approx(443.0)
