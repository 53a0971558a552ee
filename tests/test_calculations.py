"""Tests für die Notenberechnung eines einzelnen Schülers."""

import pytest

from grading.calculations import (
    StudentAverages,
    blend_overall,
    compute_category_averages,
    compute_final_mark,
    compute_student_averages,
    compute_term_mark,
    unit_average,
)
from models.assignment import Assignment
from models.class_data import ClassData
from models.student import Student
from models.unit import Unit


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

FULL = {"k": 10, "t": 10, "c": 10, "a": 10}


def _asg(aid: str, totals=None, weight=1, submitted=False, total=None, order=0) -> Assignment:
    return Assignment(
        id=aid, order=order, weight=weight, is_submitted=submitted,
        category_totals=totals or {}, total=total,
    )


def _unit(uid: str, weight, *assignments: Assignment, order: int = 1) -> Unit:
    return Unit(id=uid, order=order, weight=weight,
                assignments={a.id: a for a in assignments})


def _final(*assignments: Assignment) -> Unit:
    return Unit(id="final", order=999, is_final=True,
                assignments={a.id: a for a in assignments})


def _class(*units: Unit, weights=None, final_weight=30.0) -> ClassData:
    return ClassData(
        id="10A",
        name="Math 10",
        category_weights=weights or {"k": 25, "t": 25, "c": 25, "a": 25},
        units={u.id: u for u in units},
        final_weight=final_weight,
    )


def _student(**grades) -> Student:
    return Student(id="s1", first_name="Emma", last_name="Chen", grades=grades)


# ─── Referenz-Szenario ────────────────────────────────────────────────────────

class TestReferenceScenario:
    def test_single_unit_all_categories(self):
        """Eine Unit (100 %), eine Aufgabe, 8/10 in jeder Kategorie → 80 %."""
        cd = _class(_unit("u1", 100, _asg("a1", FULL)))
        student = _student(a1={"k": 8, "t": 8, "c": 8, "a": 8})

        avgs = compute_student_averages(student, cd)

        assert avgs.term_mark == pytest.approx(80.0)
        assert avgs.final_mark is None
        assert avgs.overall_grade == pytest.approx(80.0)
        for cat in "ktca":
            assert avgs.categories[cat] == pytest.approx(80.0)

    def test_returns_student_averages(self):
        cd = _class(_unit("u1", 100, _asg("a1", FULL)))
        assert isinstance(compute_student_averages(_student(), cd), StudentAverages)


# ─── Fehlende Daten ───────────────────────────────────────────────────────────

class TestMissingData:
    def test_no_grades_everything_none(self):
        """Ohne bewertbare Einträge sind alle Noten None (nicht 0)."""
        cd = _class(
            _unit("u1", 50, _asg("a1", FULL)),
            _unit("u2", 50, _asg("a2", FULL), order=2),
            _final(_asg("f1", total=50)),
        )
        avgs = compute_student_averages(_student(), cd)
        assert avgs.term_mark is None
        assert avgs.final_mark is None
        assert avgs.overall_grade is None
        assert avgs.categories == {"k": None, "t": None, "c": None, "a": None}

    def test_empty_class(self):
        avgs = compute_student_averages(_student(), _class())
        assert avgs.overall_grade is None

    def test_empty_string_is_ungraded(self):
        """Leerer Eintrag zählt nicht – auch nicht als 0."""
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10, "t": 10})))
        avgs = compute_student_averages(_student(a1={"k": 9, "t": ""}), cd)
        assert avgs.term_mark == pytest.approx(90.0)
        assert avgs.categories["t"] is None

    def test_unparsable_score_is_ungraded(self):
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10, "t": 10})))
        avgs = compute_student_averages(_student(a1={"k": 6, "t": "abc"}), cd)
        assert avgs.term_mark == pytest.approx(60.0)
        assert avgs.categories["t"] is None

    def test_none_grade_entry(self):
        """Ein leerer Noten-Eintrag (None) wird wie ein fehlender behandelt."""
        cd = _class(_unit("u1", 100, _asg("a1", FULL)))
        student = Student(id="s1", grades={"a1": None})
        assert compute_student_averages(student, cd).term_mark is None

    def test_numeric_string_counts(self):
        cd = _class(_unit("u1", 100, _asg("a1", {"k": "10"})))
        avgs = compute_student_averages(_student(a1={"k": "7"}), cd)
        assert avgs.term_mark == pytest.approx(70.0)

    def test_category_with_zero_max_skipped(self):
        """Kategorie mit Maximum 0 wird ignoriert, selbst wenn eine Note eingetragen ist."""
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10, "t": 0})))
        avgs = compute_student_averages(_student(a1={"k": 5, "t": 8}), cd)
        assert avgs.term_mark == pytest.approx(50.0)
        assert avgs.categories["t"] is None

    def test_missing_category_totals(self):
        cd = _class(_unit("u1", 100, Assignment(id="a1", category_totals=None)))
        avgs = compute_student_averages(_student(a1={"k": 5}), cd)
        assert avgs.term_mark is None


# ─── "M" und abgegebene Aufgaben ──────────────────────────────────────────────

class TestMarkerAndSubmitted:
    def test_m_equals_zero(self):
        """"M" ergibt exakt dasselbe Ergebnis wie eine eingetragene 0."""
        cd = _class(
            _unit("u1", 60, _asg("a1", FULL), _asg("a2", FULL, order=1)),
            _unit("u2", 40, _asg("a3", FULL), order=2),
            _final(_asg("f1", total=50)),
        )
        base = {"a2": {"k": 7, "t": 9, "c": 6, "a": 8}, "a3": {"k": 10, "t": 5}}
        with_m = _student(a1={"k": "M", "t": 4, "c": "m", "a": 3}, f1={"grade": " M "}, **base)
        with_zero = _student(a1={"k": 0, "t": 4, "c": 0, "a": 3}, f1={"grade": 0}, **base)

        assert compute_student_averages(with_m, cd) == compute_student_averages(with_zero, cd)

    def test_m_counts_in_category_average(self):
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10}), _asg("a2", {"k": 10})))
        avgs = compute_student_averages(_student(a1={"k": 10}, a2={"k": "M"}), cd)
        assert avgs.categories["k"] == pytest.approx(50.0)

    def test_submitted_assignment_invisible(self):
        """is_submitted=True wirkt wie eine Aufgabe ohne jeden Eintrag."""
        submitted = _class(_unit("u1", 100, _asg("a1", FULL), _asg("a2", FULL, submitted=True)))
        student = _student(a1={"k": 9, "t": 9, "c": 9, "a": 9}, a2={"k": 1, "t": 1, "c": 1, "a": 1})
        without_scores = _student(a1={"k": 9, "t": 9, "c": 9, "a": 9})

        assert (compute_student_averages(student, submitted)
                == compute_student_averages(without_scores, submitted))
        assert compute_student_averages(student, submitted).term_mark == pytest.approx(90.0)

    def test_submitted_final_assignment_excluded(self):
        cd = _class(_final(_asg("f1", total=100), _asg("f2", total=100, submitted=True)))
        student = _student(f1={"grade": 70}, f2={"grade": 10})
        assert compute_final_mark(student, cd) == pytest.approx(70.0)


# ─── Gewichtung ───────────────────────────────────────────────────────────────

class TestWeighting:
    def test_unit_weights(self):
        """Units werden mit ihrem Anteil gewichtet: 60 % × 100 + 40 % × 50 = 80."""
        cd = _class(
            _unit("u1", 60, _asg("a1", {"k": 10})),
            _unit("u2", 40, _asg("a2", {"k": 10}), order=2),
        )
        student = _student(a1={"k": 10}, a2={"k": 5})
        assert compute_term_mark(student, cd) == pytest.approx(80.0)

    def test_unit_without_data_contributes_nothing(self):
        """Eine Unit ohne Noten zieht die Term-Note nicht nach unten."""
        cd = _class(
            _unit("u1", 60, _asg("a1", {"k": 10})),
            _unit("u2", 40, _asg("a2", {"k": 10}), order=2),
            _unit("u3", 50, _asg("a3", {"k": 10}), order=3),
        )
        student = _student(a1={"k": 10}, a2={"k": 5})
        assert compute_term_mark(student, cd) == pytest.approx(80.0)

    def test_unit_weight_as_string(self):
        cd = _class(
            _unit("u1", "75", _asg("a1", {"k": 10})),
            _unit("u2", "25", _asg("a2", {"k": 10}), order=2),
        )
        student = _student(a1={"k": 10}, a2={"k": 0})
        assert compute_term_mark(student, cd) == pytest.approx(75.0)

    def test_all_unit_weights_zero_gives_none(self):
        cd = _class(_unit("u1", 0, _asg("a1", {"k": 10})))
        assert compute_term_mark(_student(a1={"k": 10}), cd) is None

    def test_assignment_weight(self):
        """Aufgabengewicht 3 gegen 1: (100·3 + 0·1) / 4 = 75."""
        cd = _class(_unit("u1", 100,
                          _asg("a1", {"k": 10}, weight=3),
                          _asg("a2", {"k": 10}, weight=1, order=1)))
        student = _student(a1={"k": 10}, a2={"k": 0})
        avgs = compute_student_averages(student, cd)
        assert avgs.term_mark == pytest.approx(75.0)
        assert avgs.categories["k"] == pytest.approx(75.0)

    def test_invalid_assignment_weight_defaults_to_one(self):
        cd = _class(_unit("u1", 100,
                          _asg("a1", {"k": 10}, weight="abc"),
                          _asg("a2", {"k": 10}, weight=None, order=1)))
        student = _student(a1={"k": 10}, a2={"k": 0})
        assert compute_term_mark(student, cd) == pytest.approx(50.0)

    def test_zero_assignment_weight_counts_as_one(self):
        cd = _class(_unit("u1", 100,
                          _asg("a1", {"k": 10}, weight=0),
                          _asg("a2", {"k": 10}, weight=1, order=1)))
        student = _student(a1={"k": 10}, a2={"k": 0})
        assert compute_term_mark(student, cd) == pytest.approx(50.0)

    def test_category_weights_change_term_not_categories(self):
        """Kategorie-Gewichte wirken auf die Term-Note, nicht auf die K/T/C/A-Werte."""
        units = (_unit("u1", 100, _asg("a1", {"k": 10, "t": 10})),)
        student = _student(a1={"k": 10, "t": 5})
        equal = compute_student_averages(student, _class(*units))
        skewed = compute_student_averages(
            student, _class(*units, weights={"k": 75, "t": 25, "c": 0, "a": 0})
        )

        assert equal.term_mark == pytest.approx(75.0)
        assert skewed.term_mark == pytest.approx(87.5)
        assert equal.overall_grade != pytest.approx(skewed.overall_grade)
        assert equal.categories == skewed.categories
        assert equal.categories["k"] == pytest.approx(100.0)
        assert equal.categories["t"] == pytest.approx(50.0)

    def test_zero_category_weight_excludes_category_from_term(self):
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10, "t": 10})),
                    weights={"k": 100, "t": 0, "c": 0, "a": 0})
        avgs = compute_student_averages(_student(a1={"k": 9, "t": 1}), cd)
        assert avgs.term_mark == pytest.approx(90.0)
        assert avgs.categories["t"] == pytest.approx(10.0)

    def test_unit_average(self):
        unit = _unit("u1", 100, _asg("a1", {"k": 20, "a": 10}))
        cd = _class(unit)
        assert unit_average(_student(a1={"k": 10, "a": 10}), unit, cd) == pytest.approx(75.0)
        assert unit_average(_student(), unit, cd) is None


# ─── Kategorie-Durchschnitte ──────────────────────────────────────────────────

class TestCategoryAverages:
    def test_ratio_not_mean_of_percentages(self):
        """K = Σ Punkte / Σ Maximum: (1 + 30) / (10 + 30) = 77,5 %."""
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10}), _asg("a2", {"k": 30}, order=1)))
        student = _student(a1={"k": 1}, a2={"k": 30})
        avgs = compute_student_averages(student, cd)
        assert avgs.categories["k"] == pytest.approx(77.5)
        # Term-Note mittelt dagegen die Prozentwerte: (10 + 100) / 2
        assert avgs.term_mark == pytest.approx(55.0)

    def test_across_units(self):
        cd = _class(
            _unit("u1", 90, _asg("a1", {"k": 10})),
            _unit("u2", 10, _asg("a2", {"k": 10}), order=2),
        )
        cats = compute_category_averages(_student(a1={"k": 2}, a2={"k": 8}), cd)
        assert cats["k"] == pytest.approx(50.0)

    def test_final_unit_not_in_categories(self):
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10})), _final(_asg("f1", total=10)))
        cats = compute_category_averages(_student(a1={"k": 4}, f1={"grade": 10, "k": 10}), cd)
        assert cats["k"] == pytest.approx(40.0)


# ─── Abschluss- und Gesamtnote ────────────────────────────────────────────────

class TestFinalAndOverall:
    def _cd(self, final_weight=30.0) -> ClassData:
        return _class(
            _unit("u1", 100, _asg("a1", FULL)),
            _final(_asg("f1", total=50)),
            final_weight=final_weight,
        )

    def test_blend(self):
        """Term 80, Abschluss 60, Gewicht 30 % → 80·0,7 + 60·0,3 = 74."""
        student = _student(a1={"k": 8, "t": 8, "c": 8, "a": 8}, f1={"grade": 30})
        avgs = compute_student_averages(student, self._cd())
        assert avgs.term_mark == pytest.approx(80.0)
        assert avgs.final_mark == pytest.approx(60.0)
        assert avgs.overall_grade == pytest.approx(74.0)

    def test_blend_custom_weight(self):
        student = _student(a1={"k": 8, "t": 8, "c": 8, "a": 8}, f1={"grade": 30})
        avgs = compute_student_averages(student, self._cd(final_weight=40))
        assert avgs.overall_grade == pytest.approx(72.0)

    @pytest.mark.parametrize("final_weight", [None, 0])
    def test_unset_final_weight_defaults_to_30(self, final_weight):
        student = _student(a1={"k": 8, "t": 8, "c": 8, "a": 8}, f1={"grade": 30})
        avgs = compute_student_averages(student, self._cd(final_weight=final_weight))
        assert avgs.overall_grade == pytest.approx(74.0)

    def test_only_final(self):
        avgs = compute_student_averages(_student(f1={"grade": 45}), self._cd())
        assert avgs.term_mark is None
        assert avgs.overall_grade == pytest.approx(90.0)

    def test_only_term(self):
        avgs = compute_student_averages(_student(a1={"k": 5, "t": 5, "c": 5, "a": 5}), self._cd())
        assert avgs.final_mark is None
        assert avgs.overall_grade == pytest.approx(50.0)

    def test_weighted_final_assignments(self):
        cd = _class(_final(_asg("f1", total=80, weight=2), _asg("f2", total=50, order=1)))
        student = _student(f1={"grade": 40}, f2={"grade": 50})
        # (50·2 + 100·1) / 3
        assert compute_final_mark(student, cd) == pytest.approx(200 / 3)

    def test_final_total_zero_skipped(self):
        cd = _class(_final(_asg("f1", total=0), _asg("f2", total=None, order=1)))
        assert compute_final_mark(_student(f1={"grade": 5}, f2={"grade": 5}), cd) is None

    def test_blend_overall_helper(self):
        assert blend_overall(None, None, 30) is None
        assert blend_overall(70.0, None, 30) == 70.0
        assert blend_overall(None, 65.0, "abc") == 65.0
        assert blend_overall(100.0, 0.0, "50") == pytest.approx(50.0)


# ─── Keine Korrektur von Eingaben ─────────────────────────────────────────────

class TestPassThrough:
    def test_score_above_max_not_clamped(self):
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10})))
        avgs = compute_student_averages(_student(a1={"k": 12}), cd)
        assert avgs.term_mark == pytest.approx(120.0)
        assert avgs.categories["k"] == pytest.approx(120.0)

    def test_negative_score_not_clamped(self):
        cd = _class(_unit("u1", 100, _asg("a1", {"k": 10})))
        avgs = compute_student_averages(_student(a1={"k": -2}), cd)
        assert avgs.term_mark == pytest.approx(-20.0)

    def test_input_not_mutated(self):
        cd = _class(_unit("u1", 100, _asg("a1", FULL)), _final(_asg("f1", total=50)))
        student = _student(a1={"k": "M", "t": 8}, f1={"grade": "40"})
        before = (cd.model_dump(), student.model_dump())
        compute_student_averages(student, cd)
        assert (cd.model_dump(), student.model_dump()) == before

    def test_camel_case_snapshot(self):
        """Ein Snapshot im Originalformat (camelCase) wird direkt verarbeitet."""
        cd = ClassData.model_validate({
            "id": "c1",
            "categoryWeights": {"k": 25, "t": 25, "c": 25, "a": 25},
            "finalWeight": 30,
            "units": {
                "u1": {"id": "u1", "order": 1, "weight": 100, "isFinal": False,
                       "assignments": {"a1": {"id": "a1", "weight": 1,
                                              "categoryTotals": {"k": 10, "t": 10, "c": 10, "a": 10}}}},
                "f": {"id": "f", "order": 999, "isFinal": True,
                      "assignments": {"f1": {"id": "f1", "total": 20, "isSubmitted": False}}},
            },
            "students": {"s1": {"id": "s1", "grades": {"a1": {"k": 8, "t": 8, "c": 8, "a": 8},
                                                       "f1": {"grade": 10}},
                                "startingOverallMark": 65}},
        })
        avgs = compute_student_averages(cd.students["s1"], cd)
        assert avgs.overall_grade == pytest.approx(80 * 0.7 + 50 * 0.3)
        assert cd.students["s1"].starting_overall_mark == 65


# ─── Nicht lesbare Gewichte ───────────────────────────────────────────────────

class TestUnparsableWeights:
    """Gewichte, die keine Zahl sind, fallen auf den Standardwert zurück."""

    def _snapshot(self, category_weights, final_weight) -> ClassData:
        return ClassData.model_validate({
            "id": "c1",
            "categoryWeights": category_weights,
            "finalWeight": final_weight,
            "units": {
                "u1": {"id": "u1", "order": 1, "weight": 100,
                       "assignments": {"a1": {"id": "a1", "categoryTotals": FULL}}},
                "f": {"id": "f", "order": 999, "isFinal": True,
                      "assignments": {"f1": {"id": "f1", "total": 50}}},
            },
            "students": {"s1": {"id": "s1", "grades": {
                "a1": {"k": 10, "t": 6, "c": 8, "a": 8},
                "f1": {"grade": 30},
            }}},
        })

    @pytest.mark.parametrize("final_weight", ["", "abc", "  "])
    def test_final_weight_falls_back_to_30(self, final_weight):
        """Term 80, Abschluss 60 → mit 30 % Abschlussgewicht 74."""
        cd = self._snapshot({"k": 25, "t": 25, "c": 25, "a": 25}, final_weight)
        assert cd.final_weight == final_weight
        avgs = compute_student_averages(cd.students["s1"], cd)
        assert avgs.term_mark == pytest.approx(80.0)
        assert avgs.overall_grade == pytest.approx(74.0)

    @pytest.mark.parametrize("raw", ["", "abc"])
    def test_category_weight_falls_back_to_25(self, raw):
        """K zählt mit 25 % weiter: (100 + 60 + 80 + 80) / 4 = 80, nicht 73,3."""
        cd = self._snapshot({"k": raw, "t": 25, "c": 25, "a": 25}, 30)
        avgs = compute_student_averages(cd.students["s1"], cd)
        assert avgs.term_mark == pytest.approx(80.0)
        assert avgs.categories["k"] == pytest.approx(100.0)

    def test_numeric_strings_are_used(self):
        cd = self._snapshot({"k": "50", "t": 25, "c": 25, "a": 25}, "40")
        avgs = compute_student_averages(cd.students["s1"], cd)
        # (100·50 + 60·25 + 80·25 + 80·25) / 125 = 84; 84·0,6 + 60·0,4
        assert avgs.term_mark == pytest.approx(84.0)
        assert avgs.overall_grade == pytest.approx(74.4)

    def test_snapshot_roundtrip_keeps_raw_weights(self, tmp_path):
        cd = self._snapshot({"k": "", "t": 25, "c": 25, "a": 25}, "abc")
        path = tmp_path / "c1.json"
        cd.save_json(path)
        loaded = ClassData.load_json(path)
        assert loaded.final_weight == "abc"
        assert loaded.category_weights["k"] == ""
