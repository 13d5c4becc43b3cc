from __future__ import annotations

import math
import re
import unicodedata
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Tuple

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from openpyxl import load_workbook

from pentacore.apps.core.errors import PipelineError, ScoreValidationError
from pentacore.apps.events.models import Athlete, Competition
from pentacore.apps.judging.services import lifecycle
from pentacore.apps.scoring import constants as c


# ======================
# Detección de columnas
# ======================

def _p(*patterns: str) -> List[Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


COLUMN_PATTERNS: Dict[str, List[Pattern]] = {
    "first_name": _p(r"^first\s*name$", r"^given\s*name$", r"^pr[eé]nom$", r"^first$", r"^nombres?$"),
    "last_name": _p(r"^last\s*name$", r"^sur\s*name$", r"^family\s*name$", r"^nom$", r"^last$", r"^apellidos?$"),
    "full_name": _p(r"^name$", r"^athlete$", r"^athlete\s*name$", r"^competitor$", r"^full\s*name$", r"^atleta$"),
    "country": _p(r"^country$", r"^nation$", r"^nat$", r"^nationality$", r"^pays$", r"^ctry$", r"^pa[ií]s$"),
    "gender": _p(r"^gender$", r"^sex$", r"^m/f$", r"^gen$", r"^sexo$"),
    "date_of_birth": _p(r"^dob$", r"^date\s*of\s*birth$", r"^birth\s*date$", r"^fecha\s*de\s*nacimiento$"),
    "club": _p(r"^club$", r"^team$", r"^organization$", r"^org$"),
    "fencing_victories": _p(r"^fencing\s*vict", r"^fenc.*win", r"^victories$", r"^wins$", r"^v$"),
    "fencing_bouts": _p(r"^fencing\s*bouts$", r"^bouts$", r"^total\s*bouts$"),
    "fencing_de_placement": _p(r"^fencing\s*de\s*place", r"^de\s*place", r"^bonus\s*round\s*place"),
    "obstacle_time": _p(r"^obstacle\s*time", r"^ob.*time", r"^obstacle$"),
    "obstacle_penalty": _p(r"^obstacle\s*pen",),
    "swimming_time": _p(r"^swim\s*time", r"^swimming\s*time", r"^swim$", r"^swimming$"),
    "laser_run_time": _p(r"^laser\s*run\s*time", r"^lr\s*time", r"^laser.*run$", r"^lr$"),
    "riding_knockdowns": _p(r"^riding\s*knock", r"^knock", r"^kd$"),
    "riding_disobediences": _p(r"^riding\s*disob", r"^disob", r"^refusal"),
    "riding_time_over": _p(r"^riding\s*time\s*over", r"^time\s*over$"),
}


def detect_columns(headers: List[str]) -> Dict[str, int]:
    """Primera columna que calza con cada clave; cada clave se asigna una sola vez."""
    mapping: Dict[str, int] = {}
    for col, header in enumerate(headers):
        header = (header or "").strip()
        if not header:
            continue
        for key, patterns in COLUMN_PATTERNS.items():
            if key in mapping:
                continue
            if any(p.search(header) for p in patterns):
                mapping[key] = col
    return mapping


# ======================
# Conversión de celdas
# ======================

_HMS_RE = re.compile(r"^(\d{1,2}):(\d{1,2}):(\d{1,2})(?:\.(\d{1,2}))?$")
_MS_RE = re.compile(r"^(\d{1,2}):(\d{1,2})(?:\.(\d{1,2}))?$")
_S_RE = re.compile(r"^(\d+)(?:\.(\d{1,2}))?$")


def _frac(group: Optional[str]) -> float:
    return int(group.ljust(2, "0")) / 100 if group else 0.0


def parse_time_seconds(value: Any) -> Optional[float]:
    """
    Celda de tiempo -> segundos.
    openpyxl entrega ``time`` para celdas con formato hora y números < 1
    cuando Excel guarda fracción de día.
    """
    if value in (None, ""):
        return None
    if isinstance(value, time):
        return value.hour * 3600 + value.minute * 60 + value.second + value.microsecond / 1_000_000
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return value * 86400 if 0 < value < 1 else float(value)

    s = str(value).strip()
    m = _HMS_RE.match(s)
    if m:
        return int(m.group(1)) * 3600 + int(m.group(2)) * 60 + int(m.group(3)) + _frac(m.group(4))
    m = _MS_RE.match(s)
    if m:
        return int(m.group(1)) * 60 + int(m.group(2)) + _frac(m.group(3))
    m = _S_RE.match(s)
    if m:
        return int(m.group(1)) + _frac(m.group(2))
    return None


def parse_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        num = value if isinstance(value, (int, float)) else float(str(value).strip())
        # inf -> OverflowError, nan -> ValueError
        return int(round(num))
    except (ValueError, OverflowError):
        return None


def parse_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            pass
    return None


def normalize_gender(value: Any) -> str:
    s = _strip_accents(str(value or "")).strip().lower()
    if s in ("m", "male", "man", "men", "h", "hombre", "masculino", "varon"):
        return "M"
    if s in ("f", "female", "woman", "women", "w", "mujer", "femenino"):
        return "F"
    return ""


def _strip_accents(s: str) -> str:
    return "".join(ch for ch in unicodedata.normalize("NFKD", s) if not unicodedata.combining(ch))


def split_full_name(full_name: str) -> Tuple[str, str]:
    """'Nombre Apellido' o 'APELLIDO, Nombre' -> (first_name, last_name)."""
    full_name = (full_name or "").strip()
    if "," in full_name:
        last, first = full_name.split(",", 1)
        return first.strip(), last.strip()
    parts = full_name.split()
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], " ".join(parts[1:])


# ======================
# Fila -> payloads
# ======================

def _cell(row: List[Any], mapping: Dict[str, int], key: str) -> Any:
    idx = mapping.get(key)
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def row_payloads(row: List[Any], mapping: Dict[str, int]) -> Dict[str, Dict[str, Any]]:
    """
    Payloads crudos por disciplina (solo las que traen datos en la fila).
    Una celda con contenido que no se puede leer invalida la fila completa.
    """
    out: Dict[str, Dict[str, Any]] = {}
    bad: Dict[str, str] = {}

    def read(key: str, parser):
        raw = _cell(row, mapping, key)
        value = parser(raw)
        if value is None and str(raw if raw is not None else "").strip():
            bad[key] = f"Valor ilegible: {raw!r}"
        return value

    victories = read("fencing_victories", parse_int)
    bouts = read("fencing_bouts", parse_int)
    if victories is not None and bouts is not None:
        out[c.FENCING_RANKING] = {"victories": victories, "total_bouts": bouts}

    placement = read("fencing_de_placement", parse_int)
    if placement is not None:
        out[c.FENCING_DE] = {"placement": placement}

    obstacle = read("obstacle_time", parse_time_seconds)
    penalty = read("obstacle_penalty", parse_int)
    if obstacle is not None:
        out[c.OBSTACLE] = {"time_seconds": round(obstacle, 2), "penalty_points": penalty or 0}

    swim = read("swimming_time", parse_time_seconds)
    if swim is not None:
        out[c.SWIMMING] = {"time_hundredths": int(round(swim * 100))}

    lr = read("laser_run_time", parse_time_seconds)
    if lr is not None:
        out[c.LASER_RUN] = {"finish_time_seconds": round(lr, 2)}

    kd = read("riding_knockdowns", parse_int)
    dis = read("riding_disobediences", parse_int)
    over = read("riding_time_over", parse_int)
    if any(v is not None for v in (kd, dis, over)):
        out[c.RIDING] = {
            "knockdowns": kd or 0,
            "disobediences": dis or 0,
            "time_over_seconds": over or 0,
        }

    if bad:
        raise ScoreValidationError("Celdas ilegibles en la fila", details=bad)
    return out


def _find_header_row(rows: List[List[Any]]) -> int:
    # Primera fila con al menos 3 celdas no vacías
    for i, row in enumerate(rows):
        if sum(1 for v in row if v not in (None, "")) >= 3:
            return i
    raise CommandError("No se encontró una fila de cabecera (>= 3 columnas con texto).")


def _get_or_create_athlete(first: str, last: str, country: str, gender: str, dob: Optional[date], club: str):
    qs = Athlete.objects.filter(first_name__iexact=first, last_name__iexact=last)
    if country:
        qs = qs.filter(country__iexact=country)
    athlete = qs.first()
    if athlete is not None:
        return athlete, False
    athlete = Athlete.objects.create(
        first_name=first,
        last_name=last,
        country=country or "UNK",
        gender=gender or "M",
        date_of_birth=dob,
        club=club,
    )
    return athlete, True


# ======================
# Importador
# ======================

class Command(BaseCommand):
    help = (
        "Importa resultados desde un .xlsx: detecta columnas por cabecera, crea atletas y "
        "deja puntuaciones preliminares 'pending' para revisión."
    )

    def add_arguments(self, parser):
        parser.add_argument("xlsx_path", type=str, help="Ruta al archivo .xlsx con resultados")
        parser.add_argument("--competition", required=True, help="Slug de la competencia destino")
        parser.add_argument("--sheet", type=str, default=None, help="Nombre de la hoja (por defecto: primera)")
        parser.add_argument("--dry-run", action="store_true", help="Simula sin escribir cambios")

    def handle(self, *args, **options):
        xlsx_path = Path(options["xlsx_path"])
        sheet_name = options.get("sheet")
        dry_run = options.get("dry_run", False)

        if not xlsx_path.exists():
            raise CommandError(f"Archivo no encontrado: {xlsx_path}")

        try:
            competition = Competition.objects.get(slug=options["competition"])
        except Competition.DoesNotExist:
            raise CommandError(f"Competencia '{options['competition']}' no existe.")

        wb = load_workbook(filename=str(xlsx_path), data_only=True, read_only=True)
        if sheet_name and sheet_name not in wb.sheetnames:
            raise CommandError(f"Hoja '{sheet_name}' no existe. Hojas: {wb.sheetnames}")
        ws = wb[sheet_name] if sheet_name else wb.worksheets[0]
        rows = [list(r) for r in ws.iter_rows(values_only=True)]
        wb.close()

        header_idx = _find_header_row(rows)
        headers = [str(h).strip() if h is not None else "" for h in rows[header_idx]]
        mapping = detect_columns(headers)

        has_split = "first_name" in mapping and "last_name" in mapping
        if not has_split and "full_name" not in mapping:
            raise CommandError(
                "No se detectaron columnas de nombre (Name, First Name/Last Name, Athlete). "
                f"Cabecera: {headers}"
            )
        self.stdout.write(f"Columnas detectadas: {', '.join(f'{k}={headers[v]}' for k, v in mapping.items())}")

        events = {ev.discipline: ev for ev in competition.ensure_events()} if not dry_run else {}

        total = ok = errs = athletes_created = scores_created = 0
        for row_no, row in enumerate(rows[header_idx + 1:], start=header_idx + 2):
            if sum(1 for v in row if v not in (None, "")) < 2:
                continue
            total += 1

            if has_split:
                first = str(_cell(row, mapping, "first_name") or "").strip()
                last = str(_cell(row, mapping, "last_name") or "").strip()
            else:
                first, last = split_full_name(str(_cell(row, mapping, "full_name") or ""))
            if not first and not last:
                continue

            country = str(_cell(row, mapping, "country") or "").strip().upper()[:3]
            gender = normalize_gender(_cell(row, mapping, "gender"))
            dob = parse_date(_cell(row, mapping, "date_of_birth"))
            club = str(_cell(row, mapping, "club") or "").strip()

            warnings = []
            if not country:
                warnings.append("sin país")
            if not gender:
                warnings.append("sin género (se asume M)")

            # Una fila mala se cuenta y se salta; el resto del archivo sigue
            try:
                payloads = row_payloads(row, mapping)
                if not dry_run:
                    with transaction.atomic():
                        athlete, created = _get_or_create_athlete(first, last, country, gender, dob, club)
                        for discipline, payload in payloads.items():
                            lifecycle.submit(events[discipline].pk, athlete.pk, payload)
                    athletes_created += int(created)
                    scores_created += len(payloads)
            except (PipelineError, ValueError, OverflowError) as exc:
                errs += 1
                self.stdout.write(self.style.ERROR(f"  fila {row_no}: {exc} {getattr(exc, 'details', None) or ''}"))
                continue

            ok += 1
            if dry_run:
                self.stdout.write(f"  fila {row_no}: {first} {last} -> {', '.join(payloads) or 'sin resultados'}")
            elif warnings:
                self.stdout.write(self.style.WARNING(f"  fila {row_no}: {'; '.join(warnings)}"))

        self.stdout.write(self.style.SUCCESS(f"Filas procesadas: {total}"))
        self.stdout.write(self.style.SUCCESS(f"OK: {ok}  ·  ERRORES: {errs}"))
        if dry_run:
            self.stdout.write(self.style.WARNING("Dry-run: no se crearon atletas ni puntuaciones."))
        else:
            self.stdout.write(
                self.style.SUCCESS(f"Atletas nuevos: {athletes_created}  ·  Puntuaciones pendientes: {scores_created}")
            )
