"""Scale builder: time→x and size→y mappings plus axis ticks.

Both scales are affine over their domain. The time scale interpolates on
ordinal days; end times are computed by whole calendar months (`add_months`),
never by fixed day counts.
"""

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date

from phaseflow.config import LayoutConfig
from phaseflow.models import DatasetError, FlowDataset

logger = logging.getLogger(__name__)

# Tick step thresholds for 1/2/5 × 10^k steps
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def add_months(d: date, months: int) -> date:
    """Advance a date by whole calendar months, clamping to the month's last day."""
    index = d.month - 1 + months
    year = d.year + index // 12
    month = index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return d.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class AxisTick:
    value: float | date
    position: float
    label: str


class LinearScale:
    """Affine mapping from a numeric domain onto a pixel range."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]) -> None:
        d0, d1 = domain
        if d0 == d1:
            logger.debug("Degenerate linear domain [%s, %s], widening to [%s, %s]", d0, d1, d0, d0 + 1)
            d1 = d0 + 1
        self.domain = (float(d0), float(d1))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, position: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return d0 + (position - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> list[AxisTick]:
        return [
            AxisTick(value=v, position=self(v), label=f"{v:,g}")
            for v in nice_ticks(self.domain[0], self.domain[1], count)
        ]


class TimeScale:
    """Affine mapping from a date domain onto a pixel range."""

    def __init__(self, domain: tuple[date, date], range_: tuple[float, float]) -> None:
        start, end = domain
        if start == end:
            # ±1 month keeps the single instant centred on the axis
            start, end = add_months(start, -1), add_months(end, 1)
            logger.debug("Degenerate time domain at %s, widening to %s..%s", domain[0], start, end)
        self.domain = (start, end)
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: date) -> float:
        start, end = self.domain
        r0, r1 = self.range
        span = end.toordinal() - start.toordinal()
        return r0 + (value.toordinal() - start.toordinal()) / span * (r1 - r0)

    def invert(self, position: float) -> date:
        """Nearest calendar date at a pixel position."""
        start, end = self.domain
        r0, r1 = self.range
        span = end.toordinal() - start.toordinal()
        return date.fromordinal(start.toordinal() + round((position - r0) / (r1 - r0) * span))

    def ticks(self) -> list[AxisTick]:
        """One tick on the first day of every month inside the domain."""
        start, end = self.domain
        current = start.replace(day=1)
        if current < start:
            current = add_months(current, 1)
        ticks: list[AxisTick] = []
        while current <= end:
            ticks.append(AxisTick(value=current, position=self(current), label=current.strftime("%b %Y")))
            current = add_months(current, 1)
        return ticks


def nice_ticks(start: float, stop: float, count: int = 10) -> list[float]:
    """Round tick values covering [start, stop] in steps of 1, 2 or 5 × 10^k."""
    if count <= 0 or start == stop:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start

    step = (stop - start) / count
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1

    if power < 0:
        inc = 10 ** -power / factor
        i1, i2 = round(start * inc), round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        values = [(i1 + i) / inc for i in range(i2 - i1 + 1)]
    else:
        inc = 10 ** power * factor
        i1, i2 = round(start / inc), round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
        values = [float((i1 + i) * inc) for i in range(i2 - i1 + 1)]

    return values[::-1] if reverse else values


# --- Domains ---


def time_extent(dataset: FlowDataset) -> tuple[date, date]:
    """Earliest and latest instant over project times and all phase end times."""
    if not dataset.projects:
        raise DatasetError("Cannot derive a time extent without projects")

    index = dataset.project_index()
    times = [p.time for p in dataset.projects]
    for link in dataset.links:
        times.append(add_months(index[link.source].time, link.duration))
    for phase in dataset.standalone:
        times.append(add_months(index[phase.source].time, phase.duration))
    return min(times), max(times)


def size_domain(dataset: FlowDataset) -> tuple[float, float]:
    """Magnitude domain, anchored at zero so bar heights are comparable."""
    top = max((p.size for p in dataset.projects), default=0.0)
    if top <= 0:
        logger.debug("All project sizes are zero, using size domain [0, 1]")
        return 0.0, 1.0
    return 0.0, top


@dataclass
class Scales:
    x: TimeScale
    y: LinearScale


def build_scales(dataset: FlowDataset, layout: LayoutConfig) -> Scales:
    """Build the x (time) and inverted y (size) scales over the plot area."""
    return Scales(
        x=TimeScale(time_extent(dataset), (0, layout.plot_width)),
        y=LinearScale(size_domain(dataset), (layout.plot_height, 0)),
    )
