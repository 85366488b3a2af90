import datetime
import logging
import os
import warnings
from contextlib import contextmanager
from typing import Generator

import altair as alt
import pandas as pd
import streamlit as st
from altair.utils.deprecation import AltairDeprecationWarning

warnings.filterwarnings("ignore", category=AltairDeprecationWarning)
from db import (
    BodyWeightRepository,
    CustomExerciseRepository,
    GoalRepository,
    SettingsRepository,
    WorkoutRepository,
)
from localization import translator
from stats_service import StatisticsService

LOGGER = logging.getLogger(__name__)

WINDOW_OPTIONS = ["7", "30", "90", "all"]
WINDOW_LABELS = {
    "7": "Last 7 days",
    "30": "Last 30 days",
    "90": "Last 90 days",
    "all": "All time",
}


def _(text: str) -> str:
    return translator.gettext(text)


class FitnessApp:
    """Streamlit application for logging workouts and reviewing statistics.

    The instance owns all state for one script run: repositories are loaded
    from the database on construction and every mutation is flushed before
    the next rerun.
    """

    def __init__(
        self, db_path: str = "fitness.db", yaml_path: str = "settings.yaml"
    ) -> None:
        self.test_mode = os.environ.get("TEST_MODE") == "1"
        self.settings_repo = SettingsRepository(db_path, yaml_path)
        self.language = self.settings_repo.get_text("language", "en")
        translator.set_language(self.language)
        self.default_window = self.settings_repo.get_text("default_window", "30")
        self.custom_exercises = CustomExerciseRepository(db_path)
        self.catalog = self.custom_exercises.catalog()
        self.workouts = WorkoutRepository(db_path, self.catalog)
        self.body_weights = BodyWeightRepository(db_path)
        self.goals_repo = GoalRepository(db_path)
        self.stats = StatisticsService(self.catalog)
        self._configure_page()
        self._state_init()

    def _configure_page(self) -> None:
        if st.session_state.get("layout_set"):
            return
        st.set_page_config(page_title="Fitness Tracker", page_icon="🏋️", layout="wide")
        st.session_state.layout_set = True

    def _state_init(self) -> None:
        if "log_set_count" not in st.session_state:
            st.session_state.log_set_count = 1
        if "editing_id" not in st.session_state:
            st.session_state.editing_id = None
        if "confirm_delete" not in st.session_state:
            st.session_state.confirm_delete = None
        if "flash" not in st.session_state:
            st.session_state.flash = None
        if "log_error" not in st.session_state:
            st.session_state.log_error = None

    def _metric_grid(self, metrics: list[tuple[str, object]]) -> None:
        """Render metrics in a row of columns."""
        cols = st.columns(len(metrics))
        for col, (label, val) in zip(cols, metrics):
            col.metric(label, val)

    def _line_chart(
        self,
        data: dict[str, list],
        x: list,
        *,
        x_label: str = "x",
        y_label: str = "value",
    ) -> None:
        """Render a consistent line chart with accessible labels."""
        df = pd.DataFrame({"x": x})
        for key, values in data.items():
            df[key] = values
        long_df = df.melt("x", var_name="series", value_name="value")
        chart = (
            alt.Chart(long_df)
            .mark_line(point=True)
            .encode(
                x=alt.X("x:T", title=x_label),
                y=alt.Y("value:Q", title=y_label),
                color=alt.Color(
                    "series",
                    scale=alt.Scale(scheme="dark2"),
                    legend=None if len(data) == 1 else alt.Legend(title="Series"),
                ),
            )
        )
        st.altair_chart(chart, use_container_width=True)

    def _bar_chart(
        self,
        data: dict[str, list],
        x: list,
        *,
        x_label: str = "x",
        y_label: str = "value",
        x_type: str = "O",
    ) -> None:
        """Render a consistent bar chart with accessible labels."""
        df = pd.DataFrame({"x": x})
        for key, values in data.items():
            df[key] = values
        long_df = df.melt("x", var_name="series", value_name="value")
        chart = (
            alt.Chart(long_df)
            .mark_bar()
            .encode(
                x=alt.X(f"x:{x_type}", title=x_label),
                y=alt.Y("value:Q", title=y_label),
                color=alt.Color(
                    "series",
                    scale=alt.Scale(scheme="dark2"),
                    legend=None if len(data) == 1 else alt.Legend(title="Series"),
                ),
            )
        )
        st.altair_chart(chart, use_container_width=True)

    def _pie_chart(self, distribution: dict[str, dict[str, int]]) -> None:
        df = pd.DataFrame(
            [
                {"category": c, "count": d["count"], "percentage": d["percentage"]}
                for c, d in distribution.items()
            ]
        )
        chart = (
            alt.Chart(df)
            .mark_arc(innerRadius=40)
            .encode(
                theta=alt.Theta("count:Q"),
                color=alt.Color("category:N", scale=alt.Scale(scheme="dark2")),
                tooltip=["category", "count", "percentage"],
            )
        )
        st.altair_chart(chart, use_container_width=True)

    @contextmanager
    def _section(self, title: str) -> Generator[None, None, None]:
        """Context manager for a section with a header."""
        st.header(title)
        yield

    def _format_day(self, day: datetime.date) -> str:
        weekday = _(day.strftime("%A"))
        month = _(day.strftime("%B"))
        if self.language == "de":
            return f"{weekday}, {day.day}. {month} {day.year}"
        return f"{weekday}, {month} {day.day}, {day.year}"

    @staticmethod
    def _format_weight(weight: float) -> str:
        return f"{weight:g}kg"

    def _raw_sets(self) -> list[dict]:
        return [
            {
                "weight": st.session_state.get(f"log_weight_{i}"),
                "reps": st.session_state.get(f"log_reps_{i}"),
            }
            for i in range(st.session_state.log_set_count)
        ]

    def _selected_exercise(self) -> str:
        category = st.session_state.get("log_category")
        return st.session_state.get(f"log_exercise_{category}") or ""

    def _reset_log_form(self) -> None:
        for i in range(st.session_state.log_set_count):
            st.session_state.pop(f"log_weight_{i}", None)
            st.session_state.pop(f"log_reps_{i}", None)
        st.session_state.log_set_count = 1
        st.session_state.editing_id = None

    def _add_set(self) -> None:
        st.session_state.log_set_count += 1

    def _remove_set(self, index: int) -> None:
        count = st.session_state.log_set_count
        if count <= 1:
            return
        for i in range(index, count - 1):
            for field in ("weight", "reps"):
                st.session_state[f"log_{field}_{i}"] = st.session_state.get(
                    f"log_{field}_{i + 1}"
                )
        st.session_state.pop(f"log_weight_{count - 1}", None)
        st.session_state.pop(f"log_reps_{count - 1}", None)
        st.session_state.log_set_count = count - 1

    def _save_workout(self) -> None:
        date = st.session_state.get("log_date", datetime.date.today())
        category = st.session_state.get("log_category")
        exercise = self._selected_exercise()
        editing = st.session_state.editing_id
        try:
            if editing is None:
                self.workouts.save_workout(date, exercise, self._raw_sets(), category)
                message = _("Workout saved!")
            else:
                self.workouts.update_workout(
                    editing, date, exercise, self._raw_sets(), category
                )
                message = _("Workout updated!")
        except ValueError as e:
            LOGGER.info("rejected workout: %s", e)
            st.session_state.log_error = str(e)
            return
        st.session_state.log_error = None
        st.session_state.flash = message
        self._reset_log_form()

    def _start_edit(self, entry_id: int) -> None:
        entry = self.workouts.fetch(entry_id)
        categories = self.catalog.categories()
        category = entry.category if entry.category in categories else None
        if category is None:
            category = self.catalog.category_for(entry.exercise, categories[0])
            if category not in categories:
                category = categories[0]
        self._reset_log_form()
        st.session_state.editing_id = entry_id
        st.session_state.log_date = entry.date
        st.session_state.log_category = category
        st.session_state[f"log_exercise_{category}"] = entry.exercise
        st.session_state.log_set_count = len(entry.sets)
        for i, s in enumerate(entry.sets):
            st.session_state[f"log_weight_{i}"] = float(s.weight)
            st.session_state[f"log_reps_{i}"] = int(s.reps)
        st.session_state.flash = None

    def _cancel_edit(self) -> None:
        self._reset_log_form()

    def _dashboard_tab(self) -> None:
        with self._section(_("Dashboard")):
            if "dash_window" not in st.session_state:
                st.session_state.dash_window = (
                    self.default_window
                    if self.default_window in WINDOW_OPTIONS
                    else "30"
                )
            window = st.radio(
                _("Time Window"),
                WINDOW_OPTIONS,
                format_func=lambda w: _(WINDOW_LABELS[w]),
                horizontal=True,
                key="dash_window",
            )
            entries = self.workouts.fetch_all_workouts()
            filtered = self.stats.filter_by_window(entries, window)
            overview = self.stats.overview(filtered)
            goals = self.stats.goal_progress(entries, self.goals_repo.fetch())
            self._metric_grid(
                [
                    (_("Workouts"), overview["workouts"]),
                    (_("Training Days"), overview["training_days"]),
                    (_("Volume"), f"{overview['volume']:g}"),
                    (_("Streak"), self.stats.streak(entries)),
                    (
                        _("Weekly Goal"),
                        f"{goals['weekly']['done']}/{goals['weekly']['target']}",
                    ),
                    (
                        _("Monthly Goal"),
                        f"{goals['monthly']['done']}/{goals['monthly']['target']}",
                    ),
                ]
            )
            st.progress(goals["weekly"]["percentage"] / 100)
            distribution = self.stats.category_distribution(filtered)
            weekly = self.stats.weekly_volume(entries)
            activity = self.stats.activity_series(entries)
            if not self.test_mode:
                left, right = st.columns(2)
                with left:
                    st.subheader(_("Category Distribution"))
                    if distribution:
                        self._pie_chart(distribution)
                with right:
                    st.subheader(_("Weekly Volume"))
                    if weekly:
                        self._bar_chart(
                            {_("Volume"): [w["volume"] for w in weekly]},
                            [w["week"] for w in weekly],
                            x_label=_("Week"),
                            y_label=_("Volume"),
                        )
                st.subheader(_("Activity"))
                self._bar_chart(
                    {_("Workouts"): [a["count"] for a in activity]},
                    [a["date"].isoformat() for a in activity],
                    x_label=_("Date"),
                    y_label=_("Workouts"),
                    x_type="T",
                )
            if distribution:
                st.table(
                    pd.DataFrame(
                        [
                            {
                                _("Category"): c,
                                _("Workouts"): d["count"],
                                "%": d["percentage"],
                            }
                            for c, d in distribution.items()
                        ]
                    )
                )
            records = self.stats.personal_records(entries)
            if records:
                with st.expander(_("Personal Records"), expanded=True):
                    st.table(
                        pd.DataFrame(
                            [
                                {
                                    _("Exercise"): name,
                                    _("Weight (kg)"): r["weight"],
                                    _("Reps"): r["reps"],
                                    _("Volume"): r["volume"],
                                    _("Date"): r["date"].isoformat(),
                                }
                                for name, r in sorted(records.items())
                            ]
                        )
                    )

    def _log_tab(self) -> None:
        editing = st.session_state.editing_id
        with self._section(_("Update Workout") if editing else _("Log Workout")):
            if st.session_state.flash:
                st.success(st.session_state.flash)
                st.session_state.flash = None
            if st.session_state.log_error:
                st.error(st.session_state.log_error)
                st.session_state.log_error = None
            if "log_date" in st.session_state:
                st.date_input(_("Date"), key="log_date")
            else:
                st.date_input(_("Date"), datetime.date.today(), key="log_date")
            categories = self.catalog.categories()
            category = st.selectbox(_("Category"), categories, key="log_category")
            ex_key = f"log_exercise_{category}"
            options = self.catalog.exercises(category)
            current = st.session_state.get(ex_key)
            if current and current not in options:
                options = options + [current]
            st.selectbox(_("Exercise"), options, key=ex_key)
            st.subheader(_("Sets"))
            count = st.session_state.log_set_count
            for i in range(count):
                cols = st.columns([1, 3, 3, 1])
                cols[0].markdown(f"**{_('Set')} {i + 1}**")
                w_key = f"log_weight_{i}"
                r_key = f"log_reps_{i}"
                w_kwargs = {} if w_key in st.session_state else {"value": None}
                r_kwargs = {} if r_key in st.session_state else {"value": None}
                cols[1].number_input(
                    _("Weight (kg)"),
                    min_value=0.0,
                    step=0.5,
                    key=w_key,
                    **w_kwargs,
                )
                cols[2].number_input(
                    _("Reps"),
                    min_value=0,
                    step=1,
                    key=r_key,
                    **r_kwargs,
                )
                cols[3].button(
                    "✕",
                    key=f"log_remove_{i}",
                    on_click=self._remove_set,
                    args=(i,),
                    disabled=count == 1,
                )
            st.button(_("Add Set"), key="log_add_set", on_click=self._add_set)
            st.button(
                _("Update Workout") if editing else _("Save Workout"),
                key="save_workout",
                type="primary",
                on_click=self._save_workout,
            )
            if editing:
                st.button(_("Cancel Edit"), key="cancel_edit", on_click=self._cancel_edit)

    def _history_tab(self) -> None:
        with self._section(_("History")):
            days = self.stats.history_by_day(self.workouts.fetch_all_workouts())
            if not days:
                st.info(_("No workouts logged yet."))
                return
            for day in days:
                st.subheader(self._format_day(day["date"]))
                max_sets = day["max_sets"]
                rows = []
                for entry in day["entries"]:
                    row = {_("Exercise"): entry.exercise}
                    for i in range(max_sets):
                        if i < len(entry.sets):
                            s = entry.sets[i]
                            row[f"{_('Set')} {i + 1}"] = (
                                f"{self._format_weight(s.weight)} ×{s.reps}"
                            )
                        else:
                            row[f"{_('Set')} {i + 1}"] = "–"
                    rows.append(row)
                st.table(pd.DataFrame(rows))
                for entry in day["entries"]:
                    self._history_actions(entry.id, entry.exercise)

    def _history_actions(self, entry_id: int, exercise: str) -> None:
        cols = st.columns([4, 1, 1])
        cols[0].write(exercise)
        cols[1].button(
            _("Edit"),
            key=f"hist_edit_{entry_id}",
            on_click=self._start_edit,
            args=(entry_id,),
        )
        if cols[2].button(_("Delete"), key=f"hist_del_{entry_id}"):
            st.session_state.confirm_delete = entry_id
            st.rerun()
        if st.session_state.confirm_delete == entry_id:
            st.warning(_("Delete this entry?"))
            c1, c2 = st.columns(2)
            if c1.button(_("Confirm"), key=f"hist_confirm_{entry_id}"):
                try:
                    self.workouts.delete_workout(entry_id)
                except ValueError as e:
                    st.error(str(e))
                st.session_state.confirm_delete = None
                if st.session_state.editing_id == entry_id:
                    st.session_state.editing_id = None
                st.rerun()
            if c2.button(_("Cancel"), key=f"hist_cancel_{entry_id}"):
                st.session_state.confirm_delete = None
                st.rerun()

    def _progress_tab(self) -> None:
        with self._section(_("Progress")):
            entries = self.workouts.fetch_all_workouts()
            names = list(
                dict.fromkeys(self.workouts.exercises() + self.catalog.exercises())
            )
            exercise = st.selectbox(_("Exercise"), [""] + names, key="prog_exercise")
            progress = self.stats.exercise_progress(entries, exercise)
            if exercise and not progress:
                st.info(_("No data for this exercise yet."))
            elif progress and not self.test_mode:
                dates = [p["date"].isoformat() for p in progress]
                self._line_chart(
                    {_("Weight (kg)"): [p["max_weight"] for p in progress]},
                    dates,
                    x_label=_("Date"),
                    y_label=_("Weight (kg)"),
                )
                self._line_chart(
                    {_("Volume"): [p["total_volume"] for p in progress]},
                    dates,
                    x_label=_("Date"),
                    y_label=_("Volume"),
                )
        self._weight_section()

    def _weight_section(self) -> None:
        with self._section(_("Body Weight")):
            with st.expander(_("Log Body Weight"), expanded=False):
                bw_date = st.date_input(_("Date"), datetime.date.today(), key="bw_date")
                bw_weight = st.number_input(
                    _("Weight (kg)"),
                    min_value=0.0,
                    step=0.1,
                    value=self.body_weights.fetch_latest_weight(),
                    key="bw_weight",
                )
                if st.button(_("Log Body Weight"), key="bw_log"):
                    try:
                        self.body_weights.log(bw_date, bw_weight)
                    except ValueError as e:
                        st.error(str(e))
                    else:
                        st.rerun()
            history = self.body_weights.fetch_history()
            stats = self.stats.body_weight_stats(history)
            self._metric_grid(
                [
                    (_("Latest"), stats["latest"]),
                    (_("Min"), stats["min"]),
                    (_("Max"), stats["max"]),
                    (_("Change"), stats["change"]),
                ]
            )
            trend = self.stats.body_weight_trend(history)
            if trend and not self.test_mode:
                self._line_chart(
                    {_("Body Weight"): [t["weight"] for t in trend]},
                    [t["date"].isoformat() for t in trend],
                    x_label=_("Date"),
                    y_label=_("Weight (kg)"),
                )

    def _settings_tab(self) -> None:
        with self._section(_("Settings")):
            self._goals_section()
            self._custom_exercise_section()
            with st.expander(_("Settings"), expanded=False):
                lang = st.selectbox(
                    _("Language"),
                    ["en", "de"],
                    index=0 if self.language == "en" else 1,
                    key="set_language",
                )
                window = st.selectbox(
                    _("Time Window"),
                    WINDOW_OPTIONS,
                    index=WINDOW_OPTIONS.index(self.default_window)
                    if self.default_window in WINDOW_OPTIONS
                    else 1,
                    format_func=lambda w: _(WINDOW_LABELS[w]),
                    key="set_window",
                )
                if st.button(_("Save Settings"), key="save_settings"):
                    try:
                        self.settings_repo.update(
                            {"language": lang, "default_window": window}
                        )
                    except ValueError as e:
                        st.error(str(e))
                    else:
                        st.rerun()
            st.download_button(
                _("Export CSV"),
                data=self.workouts.export_csv(),
                file_name="fitness-workouts.csv",
                mime="text/csv",
                key="export_csv",
            )

    def _goals_section(self) -> None:
        goals = self.goals_repo.fetch()
        with st.expander(_("Goals"), expanded=True):
            weekly = st.number_input(
                _("Weekly Goal"), min_value=0, step=1, value=goals.weekly, key="goal_weekly"
            )
            monthly = st.number_input(
                _("Monthly Goal"),
                min_value=0,
                step=1,
                value=goals.monthly,
                key="goal_monthly",
            )
            if st.button(_("Save Goals"), key="save_goals"):
                try:
                    self.goals_repo.update(int(weekly), int(monthly))
                except ValueError as e:
                    st.error(str(e))
                else:
                    st.success(_("Save Goals"))

    def _custom_exercise_section(self) -> None:
        with st.expander(_("Custom Exercises"), expanded=False):
            categories = self.catalog.categories()
            choice = st.selectbox(
                _("Category"),
                categories + [_("New Category")],
                key="custom_category",
            )
            new_category = ""
            if choice == _("New Category"):
                new_category = st.text_input(_("New Category"), key="custom_new_category")
            name = st.text_input(_("Exercise"), key="custom_name")
            if st.button(_("Add Exercise"), key="custom_add"):
                category = new_category if choice == _("New Category") else choice
                try:
                    self.custom_exercises.add(category, name)
                except ValueError as e:
                    st.error(str(e))
                else:
                    st.rerun()
            for category, names in self.custom_exercises.fetch_custom().items():
                for ex_name in names:
                    cols = st.columns([2, 3, 1])
                    cols[0].write(category)
                    cols[1].write(ex_name)
                    if cols[2].button("✕", key=f"custom_rm_{category}_{ex_name}"):
                        self.custom_exercises.remove(category, ex_name)
                        st.rerun()

    def run(self) -> None:
        st.title(_("Fitness Tracker"))
        (
            dashboard_tab,
            log_tab,
            history_tab,
            progress_tab,
            settings_tab,
        ) = st.tabs(
            [
                _("Dashboard"),
                _("Log Workout"),
                _("History"),
                _("Progress"),
                _("Settings"),
            ]
        )
        with dashboard_tab:
            self._dashboard_tab()
        with log_tab:
            self._log_tab()
        with history_tab:
            self._history_tab()
        with progress_tab:
            self._progress_tab()
        with settings_tab:
            self._settings_tab()


if __name__ == "__main__":
    db_path = os.environ.get("DB_PATH", "fitness.db")
    yaml_path = os.environ.get("YAML_PATH", "settings.yaml")
    FitnessApp(db_path=db_path, yaml_path=yaml_path).run()
