class Translator:
    def __init__(self) -> None:
        self.language = "en"
        self.translations = {
            "en": {},
            "de": {
                "Fitness Tracker": "Fitness Tracker",
                "Dashboard": "Übersicht",
                "Log Workout": "Training eintragen",
                "History": "Verlauf",
                "Progress": "Fortschritt",
                "Settings": "Einstellungen",
                "Date": "Datum",
                "Category": "Kategorie",
                "Exercise": "Übung",
                "Sets": "Sätze",
                "Set": "Satz",
                "Weight (kg)": "Gewicht (kg)",
                "Reps": "Wdh",
                "Add Set": "+ Satz hinzufügen",
                "Save Workout": "Training speichern",
                "Update Workout": "Training aktualisieren",
                "Cancel Edit": "Bearbeiten abbrechen",
                "Workout saved!": "Training gespeichert!",
                "Workout updated!": "Training aktualisiert!",
                "No workouts logged yet.": "Noch keine Trainings eingetragen.",
                "Delete this entry?": "Diesen Eintrag wirklich löschen?",
                "Delete": "Löschen",
                "Edit": "Bearbeiten",
                "Confirm": "Bestätigen",
                "Cancel": "Abbrechen",
                "Time Window": "Zeitraum",
                "Last 7 days": "Letzte 7 Tage",
                "Last 30 days": "Letzte 30 Tage",
                "Last 90 days": "Letzte 90 Tage",
                "All time": "Gesamt",
                "Workouts": "Trainings",
                "Streak": "Serie",
                "Volume": "Volumen",
                "Training Days": "Trainingstage",
                "Weekly Goal": "Wochenziel",
                "Monthly Goal": "Monatsziel",
                "Personal Records": "Persönliche Rekorde",
                "Category Distribution": "Verteilung nach Kategorie",
                "Weekly Volume": "Wöchentliches Volumen",
                "Activity": "Aktivität",
                "Body Weight": "Körpergewicht",
                "Latest": "Aktuell",
                "Min": "Min",
                "Max": "Max",
                "Change": "Veränderung",
                "Week": "Woche",
                "Log Body Weight": "Körpergewicht eintragen",
                "Goals": "Ziele",
                "Save Goals": "Ziele speichern",
                "Custom Exercises": "Eigene Übungen",
                "Add Exercise": "Übung hinzufügen",
                "New Category": "Neue Kategorie",
                "Export CSV": "CSV exportieren",
                "Language": "Sprache",
                "Save Settings": "Einstellungen speichern",
                "No data for this exercise yet.": "Noch keine Daten für diese Übung.",
                "Monday": "Montag",
                "Tuesday": "Dienstag",
                "Wednesday": "Mittwoch",
                "Thursday": "Donnerstag",
                "Friday": "Freitag",
                "Saturday": "Samstag",
                "Sunday": "Sonntag",
                "January": "Januar",
                "February": "Februar",
                "March": "März",
                "May": "Mai",
                "June": "Juni",
                "July": "Juli",
                "October": "Oktober",
                "December": "Dezember",
            },
        }

    def set_language(self, lang: str) -> None:
        self.language = lang

    def gettext(self, key: str) -> str:
        return self.translations.get(self.language, {}).get(key, key)

translator = Translator()
