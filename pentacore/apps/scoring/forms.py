# pentacore/apps/scoring/forms.py
"""
Variantes cerradas de payload por disciplina.

Cada disciplina tiene su form; un payload que no valida es un error de
validación antes de llegar a la calculadora.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Type

from django import forms

from . import constants as c
from .calculators import is_laser_run_time, parse_laser_run_time, parse_swimming_time
from .calculators.swimming import is_swimming_time


class DisciplinePayloadForm(forms.Form):
    """Base: completa defaults de campos opcionales y expone ``payload()``."""

    defaults: Dict[str, Any] = {}

    def clean(self):
        cleaned = super().clean()
        for name, default in self.defaults.items():
            if cleaned.get(name) in (None, ""):
                cleaned[name] = default
        return cleaned

    def payload(self) -> Dict[str, Any]:
        return {k: v for k, v in self.cleaned_data.items() if v not in (None, "")}


class FencingRankingForm(DisciplinePayloadForm):
    victories = forms.IntegerField(min_value=0, max_value=100)
    total_bouts = forms.IntegerField(min_value=1, max_value=100)

    def clean(self):
        cleaned = super().clean()
        v, b = cleaned.get("victories"), cleaned.get("total_bouts")
        if v is not None and b is not None and v > b:
            raise forms.ValidationError("Las victorias no pueden superar el total de asaltos.")
        return cleaned


class FencingDEForm(DisciplinePayloadForm):
    placement = forms.IntegerField(min_value=1, max_value=100)


class ObstacleForm(DisciplinePayloadForm):
    time_seconds = forms.FloatField(min_value=0, max_value=600)
    penalty_points = forms.IntegerField(min_value=0, max_value=100, required=False)

    defaults = {"penalty_points": 0}


class SwimmingForm(DisciplinePayloadForm):
    time_hundredths = forms.IntegerField(min_value=0, max_value=100000, required=False)
    # Alternativa legible: "MM:SS.hh"
    time = forms.CharField(required=False, max_length=16)
    penalty_points = forms.IntegerField(min_value=0, max_value=100, required=False)

    defaults = {"penalty_points": 0}

    def clean_time(self):
        val = (self.cleaned_data.get("time") or "").strip()
        if val and not is_swimming_time(val):
            raise forms.ValidationError("Formato inválido. Use MM:SS.hh (ej. 01:10.00).")
        return val

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("time_hundredths") is None:
            if cleaned.get("time"):
                cleaned["time_hundredths"] = parse_swimming_time(cleaned["time"])
            elif "time" not in self.errors:
                raise forms.ValidationError("Debe indicar time_hundredths o time.")
        return cleaned


class LaserRunForm(DisciplinePayloadForm):
    START_MODE_CHOICES = (("staggered", "Escalonada"), ("mass", "En masa"))
    GATE_CHOICES = (("A", "A"), ("B", "B"), ("P", "P"))

    finish_time_seconds = forms.FloatField(min_value=0, max_value=3600, required=False)
    # Alternativa legible: "M:SS", "MM:SS" o "MM:SS.ff"
    finish_time = forms.CharField(required=False, max_length=16)
    overall_time_seconds = forms.FloatField(min_value=0, max_value=3600, required=False)
    penalty_seconds = forms.IntegerField(min_value=0, max_value=600, required=False)

    # Metadatos del cronómetro (no afectan el cálculo)
    start_mode = forms.ChoiceField(choices=START_MODE_CHOICES, required=False)
    handicap_start_delay = forms.IntegerField(min_value=0, required=False)
    is_pack_start = forms.BooleanField(required=False)
    shooting_station = forms.IntegerField(min_value=0, max_value=20, required=False)
    gate_assignment = forms.ChoiceField(choices=GATE_CHOICES, required=False)

    defaults = {
        "penalty_seconds": 0,
        "start_mode": "staggered",
        "handicap_start_delay": 0,
        "shooting_station": 0,
        "gate_assignment": "A",
    }

    def clean_finish_time(self):
        val = (self.cleaned_data.get("finish_time") or "").strip()
        if val and not is_laser_run_time(val):
            raise forms.ValidationError("Formato inválido. Use M:SS, MM:SS o MM:SS.ff (ej. 8:45).")
        return val

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("finish_time_seconds") is None:
            if cleaned.get("finish_time"):
                cleaned["finish_time_seconds"] = parse_laser_run_time(cleaned["finish_time"])
            elif cleaned.get("overall_time_seconds") is not None:
                cleaned["finish_time_seconds"] = cleaned["overall_time_seconds"]
            elif "finish_time" not in self.errors:
                raise forms.ValidationError("Debe indicar finish_time_seconds o finish_time.")
        return cleaned

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        # BooleanField vacío es False: lo conservamos explícito
        data["is_pack_start"] = bool(self.cleaned_data.get("is_pack_start"))
        return data


class RidingForm(DisciplinePayloadForm):
    knockdowns = forms.IntegerField(min_value=0, max_value=50, required=False)
    disobediences = forms.IntegerField(min_value=0, max_value=50, required=False)
    time_over_seconds = forms.IntegerField(min_value=0, max_value=600, required=False)
    other_penalties = forms.IntegerField(min_value=0, max_value=500, required=False)

    defaults = {"knockdowns": 0, "disobediences": 0, "time_over_seconds": 0, "other_penalties": 0}


PAYLOAD_FORMS: Mapping[str, Type[DisciplinePayloadForm]] = {
    c.FENCING_RANKING: FencingRankingForm,
    c.FENCING_DE: FencingDEForm,
    c.OBSTACLE: ObstacleForm,
    c.SWIMMING: SwimmingForm,
    c.LASER_RUN: LaserRunForm,
    c.RIDING: RidingForm,
}
