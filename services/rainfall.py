"""
Rainfall acquisition with ordered fallback
Tries Open-Meteo historical archive, then NASA POWER hourly, then a static figure
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Tuple

import requests

from services.errors import RainfallSourceError
from services.validation import validate_monthly_rainfall, validate_rainfall_data
from utils.config import API_TIMEOUT, NASA_POWER_HOURLY_URL, OPEN_METEO_ARCHIVE_URL, USER_AGENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RainfallResult:
    annual_mm: float
    monthly_mm: Tuple[float, ...]
    data_period: str
    years_count: int
    source: str

    def to_dict(self):
        return {
            'annual_mm': self.annual_mm,
            'monthly_mm': list(self.monthly_mm),
            'data_period': self.data_period,
            'years_count': self.years_count,
            'source': self.source,
        }


def _utc_now():
    return datetime.now(timezone.utc)


def _get_json(url, params, timeout, source):
    """Single GET attempt; every failure mode becomes RainfallSourceError"""
    try:
        response = requests.get(url, params=params, headers={'User-Agent': USER_AGENT}, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.Timeout as e:
        raise RainfallSourceError(f"{source} timed out after {timeout}s") from e
    except requests.exceptions.RequestException as e:
        raise RainfallSourceError(f"{source} request failed: {e}") from e
    except ValueError as e:
        raise RainfallSourceError(f"{source} returned invalid JSON: {e}") from e


class RainfallProvider:
    """
    One rainfall source

    Subclasses implement _fetch(); fetch() maps payload errors to
    RainfallSourceError and logs results outside the usual rainfall ranges.
    """

    name = 'provider'

    def fetch(self, lat, lon) -> RainfallResult:
        try:
            result = self._fetch(lat, lon)
        except RainfallSourceError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RainfallSourceError(f"{self.name} returned an unexpected payload: {e}") from e

        # Out-of-range values are logged, not rejected
        for check in (validate_rainfall_data(result.annual_mm), validate_monthly_rainfall(result.monthly_mm)):
            if not check.is_valid:
                logger.warning(f"{self.name} rainfall outside expected range at "
                               f"({lat:.4f}, {lon:.4f}): {check.error}")
        return result

    def _fetch(self, lat, lon):
        raise NotImplementedError


def archive_window(today):
    """
    Two complete calendar years ending on the last fully elapsed year

    December counts the current year as complete.
    """
    end_year = today.year if today.month == 12 else today.year - 1
    return end_year - 1, end_year


class OpenMeteoArchiveProvider(RainfallProvider):
    """
    Open-Meteo Historical Weather API
    FREE, no API key required!
    """

    name = 'open_meteo_archive'

    def __init__(self, url=OPEN_METEO_ARCHIVE_URL, timeout=API_TIMEOUT, clock=_utc_now):
        self.url = url
        self.timeout = timeout
        self.clock = clock

    def _fetch(self, lat, lon):
        start_year, end_year = archive_window(self.clock())

        params = {
            "latitude": lat,
            "longitude": lon,
            "start_date": f"{start_year}-01-01",
            "end_date": f"{end_year}-12-31",
            "daily": "precipitation_sum",
            "timezone": "auto"
        }
        data = _get_json(self.url, params, self.timeout, 'Open-Meteo Historical API')

        daily = data.get('daily') or {}
        daily_precip = daily.get('precipitation_sum')
        dates = daily.get('time')
        if not daily_precip or not dates:
            raise RainfallSourceError("No precipitation data available")

        monthly = [0.0] * 12
        for day, precip in zip(dates, daily_precip):
            month = date.fromisoformat(day).month
            monthly[month - 1] += float(precip or 0)

        years_count = end_year - start_year + 1
        monthly_avg = tuple(round(total / years_count) for total in monthly)
        annual = sum(monthly_avg)

        logger.info(f"Open-Meteo: {annual}mm/year at ({lat:.4f}, {lon:.4f}) "
                    f"(avg of {start_year}-{end_year})")
        return RainfallResult(
            annual_mm=annual,
            monthly_mm=monthly_avg,
            data_period=f"{start_year}-{end_year}",
            years_count=years_count,
            source=self.name,
        )


def trailing_year_window(today):
    """NASA POWER date strings (YYYYMMDD) for the 365 days ending today"""
    end = today.date() if isinstance(today, datetime) else today
    start = end - timedelta(days=365)
    return start.strftime('%Y%m%d'), end.strftime('%Y%m%d')


class NasaPowerHourlyProvider(RainfallProvider):
    """
    NASA POWER hourly point API, used for recent data
    FREE, no API key required!
    """

    name = 'nasa_power_hourly'

    def __init__(self, url=NASA_POWER_HOURLY_URL, timeout=API_TIMEOUT, clock=_utc_now):
        self.url = url
        self.timeout = timeout
        self.clock = clock

    def _fetch(self, lat, lon):
        start, end = trailing_year_window(self.clock())

        params = {
            "start": start,
            "end": end,
            "latitude": lat,
            "longitude": lon,
            "community": "ag",
            "parameters": "PRECTOT",
            "format": "json",
            "time-standard": "utc"
        }
        data = _get_json(self.url, params, self.timeout, 'NASA POWER API')

        series = data.get('properties', {}).get('parameter', {}).get('PRECTOT')
        if not isinstance(series, dict):
            raise RainfallSourceError("NASA POWER missing PRECTOT data")

        monthly = [0.0] * 12
        total = 0.0
        for ts, value in series.items():
            # ts format: YYYYMMDDHH
            try:
                month = int(ts[4:6])
            except ValueError:
                continue
            mm = float(value or 0)
            # -999 marks missing hours
            if mm < 0 or not 1 <= month <= 12:
                continue
            monthly[month - 1] += mm
            total += mm

        logger.info(f"NASA POWER: {total:.1f}mm over {start}-{end} at ({lat:.4f}, {lon:.4f})")
        return RainfallResult(
            annual_mm=round(total),
            monthly_mm=tuple(round(m) for m in monthly),
            data_period=f"{start}-{end}",
            years_count=1,
            source=self.name,
        )


class StaticRainfallProvider(RainfallProvider):
    """Fallback: configured annual figure spread evenly over the year. Never fails."""

    name = 'static_fallback'

    def __init__(self, annual_mm):
        self.annual_mm = annual_mm

    def fetch(self, lat, lon) -> RainfallResult:
        return self._fetch(lat, lon)

    def _fetch(self, lat, lon):
        logger.warning(f"Using fallback rainfall data for ({lat:.4f}, {lon:.4f})")
        return RainfallResult(
            annual_mm=self.annual_mm,
            monthly_mm=tuple(round(self.annual_mm / 12) for _ in range(12)),
            data_period='static',
            years_count=1,
            source=self.name,
        )


class RainfallChain:
    """
    Tries each provider in order and returns the first success

    Ending the list with a StaticRainfallProvider makes resolve() infallible;
    build_default_chain() always does.
    """

    def __init__(self, providers):
        if not providers:
            raise ValueError("RainfallChain needs at least one provider")
        self.providers = tuple(providers)

    def resolve(self, lat, lon) -> RainfallResult:
        last_error = None
        for provider in self.providers:
            try:
                return provider.fetch(lat, lon)
            except RainfallSourceError as e:
                logger.warning(f"{provider.name} failed, trying next source: {e}")
                last_error = e
        raise RainfallSourceError(f"All rainfall sources failed: {last_error}")


def build_default_chain(fallback_annual_mm, timeout=API_TIMEOUT):
    """Open-Meteo archive -> NASA POWER hourly -> static fallback"""
    return RainfallChain([
        OpenMeteoArchiveProvider(timeout=timeout),
        NasaPowerHourlyProvider(timeout=timeout),
        StaticRainfallProvider(fallback_annual_mm),
    ])


def fetch_nasa_hourly_raw(start, end, lat, lon, parameters='PRECTOT', community='ag',
                          fmt='json', units=None, timeout=API_TIMEOUT):
    """
    Pass-through to the NASA POWER hourly endpoint

    Upstream error bodies (e.g. a 422 for bad dates) are returned as-is with
    their status instead of being raised.

    Returns:
        tuple: (status_code, decoded JSON body)

    Raises:
        RainfallSourceError: network failure, timeout, or a non-JSON body
    """
    params = {
        "start": start,
        "end": end,
        "latitude": lat,
        "longitude": lon,
        "community": community,
        "parameters": parameters,
        "format": fmt,
        "time-standard": "utc"
    }
    if units:
        params['units'] = units

    try:
        response = requests.get(NASA_POWER_HOURLY_URL, params=params,
                                headers={'User-Agent': USER_AGENT}, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise RainfallSourceError(f"NASA POWER API timed out after {timeout}s") from e
    except requests.exceptions.RequestException as e:
        raise RainfallSourceError(f"NASA POWER API request failed: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise RainfallSourceError(
            f"NASA POWER API returned invalid JSON (HTTP {response.status_code})") from e

    if response.status_code >= 400:
        logger.warning(f"NASA POWER API returned HTTP {response.status_code} for {start}-{end}")
    return response.status_code, data
