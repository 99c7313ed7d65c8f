# Copyright 2025 by John A Kline <john@johnkline.com>
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License
# as published by the Free Software Foundation; either version 2
# of the License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.

"""
WeeWX module that reads PurpleAir sensors over the LAN.

A PurpleAir sensor serves its current reading as a flat JSON document at
http://<sensor>/json (add ?live=true for the live reading rather than the
two minute average).  The document is wrapped in a LanMeasurement, which
offers typed access to the raw fields plus derived values: temperatures in
Celsius, the PM2.5 AQI, and the US EPA correction for PurpleAir sensors.
"""

import abc
import datetime
import enum
import logging
import math
import re
import requests
import sys
import threading
import time

from dateutil import tz
from dateutil.parser import isoparse

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

import weeutil.logger
import weewx
import weewx.units
import weewx.xtypes

from weeutil.weeutil import timestamp_to_string
from weeutil.weeutil import to_bool
from weeutil.weeutil import to_int
from weewx.engine import StdService

log = logging.getLogger(__name__)

WEEWX_PURPLELAN_VERSION = "1.0"

if sys.version_info[0] < 3 or (sys.version_info[0] == 3 and sys.version_info[1] < 9):
    raise weewx.UnsupportedFeature(
        "weewx-purplelan requires Python 3.9 or later, found %s.%s" % (sys.version_info[0], sys.version_info[1]))

if weewx.__version__ < "4":
    raise weewx.UnsupportedFeature(
        "weewx-purplelan requires WeeWX 4, found %s" % weewx.__version__)

# Set up observation types not in weewx.units

weewx.units.USUnits['air_quality_index']       = 'aqi'
weewx.units.MetricUnits['air_quality_index']   = 'aqi'
weewx.units.MetricWXUnits['air_quality_index'] = 'aqi'

weewx.units.USUnits['air_quality_color']       = 'aqi_color'
weewx.units.MetricUnits['air_quality_color']   = 'aqi_color'
weewx.units.MetricWXUnits['air_quality_color'] = 'aqi_color'

weewx.units.default_unit_label_dict['aqi']  = ' AQI'
weewx.units.default_unit_label_dict['aqi_color'] = ' RGB'

weewx.units.default_unit_format_dict['aqi']  = '%d'
weewx.units.default_unit_format_dict['aqi_color'] = '%d'

weewx.units.obs_group_dict['pm2_5_aqi'] = 'air_quality_index'
weewx.units.obs_group_dict['pm2_5_aqi_color'] = 'air_quality_color'

JsonValue = Union[float, int, str]
JsonDocument = Mapping[str, JsonValue]

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1


class SchemaViolation(Exception):
    """The sensor's JSON does not match the documented PurpleAir LAN format."""

    def __init__(self, key: str, reason: str):
        super(SchemaViolation, self).__init__('%s: %s' % (key, reason))
        self.key = key
        self.reason = reason


class JsonKind(enum.Enum):
    FLOAT  = 'float'
    INT64  = 'i64 int'
    UINT64 = 'u64 int'
    STRING = 'string'


def is_kind(value: Any, kind: JsonKind) -> bool:
    # bool is a subclass of int, but JSON true/false is never a number.
    if kind == JsonKind.FLOAT:
        # NaN and Infinity are not valid readings.
        return isinstance(value, float) and math.isfinite(value)
    if kind == JsonKind.STRING:
        return isinstance(value, str)
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    if kind == JsonKind.INT64:
        return INT64_MIN <= value <= INT64_MAX
    return 0 <= value <= UINT64_MAX


def get_field(j: JsonDocument, key: str, kind: JsonKind) -> JsonValue:
    """Return j[key], raising SchemaViolation if it is missing or not of the
    expected kind.  Values are never coerced."""
    if key not in j:
        raise SchemaViolation(key, 'missing from PurpleAir LAN JSON')
    value = j[key]
    if not is_kind(value, kind):
        raise SchemaViolation(key, 'is not a %s, got: %r' % (kind.value, value))
    return value


def get_optional_field(j: JsonDocument, key: str, kind: JsonKind) -> Optional[JsonValue]:
    """Like get_field, but an absent key yields None."""
    if key not in j:
        return None
    return get_field(j, key, kind)


def get_string(j: JsonDocument, key: str) -> str:
    return get_field(j, key, JsonKind.STRING)

def get_f64(j: JsonDocument, key: str) -> float:
    return get_field(j, key, JsonKind.FLOAT)

def get_i64(j: JsonDocument, key: str) -> int:
    return get_field(j, key, JsonKind.INT64)

def get_u64(j: JsonDocument, key: str) -> int:
    return get_field(j, key, JsonKind.UINT64)


class PmSize(enum.Enum):
    PM0_3  = '0_3'
    PM0_5  = '0_5'
    PM1_0  = '1_0'
    PM2_5  = '2_5'
    PM5_0  = '5_0'
    PM10_0 = '10_0'

class PmType(enum.Enum):
    ATM = 'atm'
    CF1 = 'cf_1'

class Channel(enum.Enum):
    A = ''   # primary sensor, keys carry no suffix
    B = '_b'

# The sensor reports counts, but not mass, for these sizes.
SIZES_WITHOUT_MASS = (PmSize.PM0_3, PmSize.PM0_5, PmSize.PM5_0)


def f_to_c(f: float) -> float:
    return (f - 32.0) * 5.0 / 9.0

def exhibits_twenty_fold_delta(val_1: float, val_2: float) -> bool:
    # If either value is zero, skip this check.
    if val_1 == 0.0 or val_2 == 0.0:
        return False
    return (val_1 * 20.0) < val_2 or (val_2 * 20.0) < val_1

def compute_pm2_5_aqi_color(pm2_5_aqi):
    if pm2_5_aqi <= 50:
        return 228 << 8                      # Green
    elif pm2_5_aqi <= 100:
        return (255 << 16) + (255 << 8)      # Yellow
    elif pm2_5_aqi <=  150:
        return (255 << 16) + (126 << 8)      # Orange
    elif pm2_5_aqi <= 200:
        return 255 << 16                     # Red
    elif pm2_5_aqi <= 300:
        return (143 << 16) + (63 << 8) + 151 # Purple
    else:
        return (126 << 16) + 35              # Maroon


#             U.S. EPA PM2.5 AQI breakpoints
#
# Concentrations are in tenths of ug/m3 so that a reading lands in exactly
# one row no matter how many decimals the sensor reports.
CONCENTRATION_LIMITS = (
    (   0,  120),
    ( 121,  354),
    ( 355,  554),
    ( 555, 1504),
    (1505, 2504),
    (2505, 3504),
    (3505, 5004),
)

AQI_LIMITS = (
    (  0,  50),
    ( 51, 100),
    (101, 150),
    (151, 200),
    (201, 300),
    (301, 400),
    (401, 500),
)

assert len(CONCENTRATION_LIMITS) == len(AQI_LIMITS)


class Measurement(abc.ABC):
    """A single reading from a PurpleAir sensor.

    Concrete sources implement the raw accessors.  Everything else (unit
    conversions, AQI, EPA correction) is derived from them here.

    Raw accessors raise SchemaViolation when the source data is malformed.
    A value that the sensor legitimately does not report (e.g., mass at
    0.3um, or anything on channel B of a single channel sensor) is None.
    """

    @staticmethod
    def get_aqi(pm_2v5: float) -> float:
        """PM2.5 AQI for a concentration in ug/m3.

        Concentrations above the table extrapolate along the last row.
        Raises ValueError for NaN or infinite concentrations.
        """
        if not math.isfinite(pm_2v5):
            raise ValueError('pm2.5 concentration must be finite, got: %r' % pm_2v5)
        # Truncate to tenths before picking a row, so 12.05 lands in the
        # 0.0 - 12.0 row rather than between rows.
        pm_2v5_tenths = math.trunc(10.0 * pm_2v5)

        idx = len(CONCENTRATION_LIMITS) - 1
        for i, (low, high) in enumerate(CONCENTRATION_LIMITS):
            if low <= pm_2v5_tenths <= high:
                idx = i
                break

        c_low  = CONCENTRATION_LIMITS[idx][0] / 10.0
        c_high = CONCENTRATION_LIMITS[idx][1] / 10.0
        i_low  = float(AQI_LIMITS[idx][0])
        i_high = float(AQI_LIMITS[idx][1])
        c = pm_2v5_tenths / 10.0
        return (i_high - i_low) * (c - c_low) / (c_high - c_low) + i_low

    @staticmethod
    def get_epa_correction(pm2_5_cf_1_a: float, pm2_5_cf_1_b: float, humidity: int) -> float:
        """US EPA correction for PurpleAir PM2.5.

        Uses the equation on page 8 of
        https://cfpub.epa.gov/si/si_public_record_report.cfm?Lab=CEMM&dirEntryId=349513

        The paper recommends applying it to 1-hour averages; it is applied
        here to the single reading at hand.

        pm2_5_cf_1_a: channel A PM2.5 (CF=1) in ug/m3
        pm2_5_cf_1_b: channel B PM2.5 (CF=1) in ug/m3
        humidity    : relative humidity reported by the sensor

        Returns the corrected PM2.5 in ug/m3, never less than zero.
        """
        pm2_5_mean = (pm2_5_cf_1_a + pm2_5_cf_1_b) / 2.0
        # Near zero concentration with high humidity goes negative.
        return max(0.0, 0.52 * pm2_5_mean - 0.085 * humidity + 5.71)

    def pm_2v5_epa_correction(self) -> Optional[float]:
        pm2_5_cf_1 = [self.particulate_mass(PmSize.PM2_5, PmType.CF1, channel) for channel in Channel]
        if None in pm2_5_cf_1:
            return None
        return Measurement.get_epa_correction(pm2_5_cf_1[0], pm2_5_cf_1[1], self.humidity())

    def pm_2v5_aqi_epa(self) -> Optional[float]:
        pm2_5 = self.pm_2v5_epa_correction()
        if pm2_5 is None:
            return None
        return Measurement.get_aqi(pm2_5)

    def channels(self) -> List[Channel]:
        return [channel for channel in Channel if self.pm_2v5_aqi(channel) is not None]

    def particulate_mass_avg(self, pm_size: PmSize, pm_type: PmType) -> Optional[float]:
        values = [self.particulate_mass(pm_size, pm_type, channel) for channel in Channel]
        values = [value for value in values if value is not None]
        if not values:
            return None
        return sum(values) / len(values)

    def channels_disagree(self) -> bool:
        for pm_size in [PmSize.PM1_0, PmSize.PM2_5, PmSize.PM10_0]:
            a = self.particulate_mass(pm_size, PmType.CF1, Channel.A)
            b = self.particulate_mass(pm_size, PmType.CF1, Channel.B)
            if a is not None and b is not None and exhibits_twenty_fold_delta(a, b):
                log.debug('channels_disagree: pm%s_cf_1 A: %f, B: %f' % (pm_size.value, a, b))
                return True
        return False

    def temp_c(self) -> float:
        return f_to_c(self.temp_f())

    def dew_point_c(self) -> float:
        return f_to_c(self.dew_point_f())

    @abc.abstractmethod
    def sensor_id(self) -> str: ...

    @abc.abstractmethod
    def timestamp(self) -> datetime.datetime: ...

    @abc.abstractmethod
    def latitude(self) -> float: ...

    @abc.abstractmethod
    def longitude(self) -> float: ...

    @abc.abstractmethod
    def place(self) -> str: ...

    @abc.abstractmethod
    def rssi(self) -> int: ...

    @abc.abstractmethod
    def uptime(self) -> int: ...

    @abc.abstractmethod
    def temp_f(self) -> int: ...

    @abc.abstractmethod
    def humidity(self) -> int: ...

    @abc.abstractmethod
    def dew_point_f(self) -> int: ...

    @abc.abstractmethod
    def pressure(self) -> float: ...

    @abc.abstractmethod
    def pm_2v5_aqi(self, channel: Channel) -> Optional[float]: ...

    @abc.abstractmethod
    def particulate_mass(self, pm_size: PmSize, pm_type: PmType, channel: Channel) -> Optional[float]: ...

    @abc.abstractmethod
    def particle_count(self, pm_size: PmSize, channel: Channel) -> Optional[float]: ...


RFC3339_RE = re.compile(r'\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})\Z')

def datetime_from_reading(dt_str: str) -> datetime.datetime:
    # PurpleAir sends 2021/01/02T03:04:05z
    rfc3339 = dt_str.upper().replace('/', '-')
    # isoparse also takes reduced precision and basic format; RFC 3339 does not.
    if not RFC3339_RE.match(rfc3339):
        raise SchemaViolation('DateTime', 'is not an RFC 3339 date-time: %s' % dt_str)
    try:
        dt = isoparse(rfc3339)
    except ValueError as e:
        raise SchemaViolation('DateTime', 'could not be converted to a dateTime: %s (%s)' % (dt_str, e))
    return dt.astimezone(tz.UTC)


class LanMeasurement(Measurement):
    """Measurement backed by the JSON served at http://<sensor>/json."""

    def __init__(self, j: JsonDocument):
        self._json: Dict[str, JsonValue] = dict(j)

    def __repr__(self):
        return 'LanMeasurement(%r)' % self._json

    def sensor_id(self) -> str:
        return get_string(self._json, 'SensorId')

    def timestamp(self) -> datetime.datetime:
        return datetime_from_reading(get_string(self._json, 'DateTime'))

    def latitude(self) -> float:
        return get_f64(self._json, 'lat')

    def longitude(self) -> float:
        return get_f64(self._json, 'lon')

    def place(self) -> str:
        return get_string(self._json, 'place')

    def rssi(self) -> int:
        return get_i64(self._json, 'rssi')

    def uptime(self) -> int:
        return get_u64(self._json, 'uptime')

    def temp_f(self) -> int:
        return get_i64(self._json, 'current_temp_f')

    def humidity(self) -> int:
        return get_i64(self._json, 'current_humidity')

    def dew_point_f(self) -> int:
        return get_i64(self._json, 'current_dewpoint_f')

    def pressure(self) -> float:
        return get_f64(self._json, 'pressure')

    def pm_2v5_aqi(self, channel: Channel) -> Optional[float]:
        aqi = get_optional_field(self._json, 'pm2.5_aqi%s' % channel.value, JsonKind.INT64)
        return None if aqi is None else float(aqi)

    def particulate_mass(self, pm_size: PmSize, pm_type: PmType, channel: Channel) -> Optional[float]:
        if pm_size in SIZES_WITHOUT_MASS:
            return None
        key = 'pm%s_%s%s' % (pm_size.value, pm_type.value, channel.value)
        return get_optional_field(self._json, key, JsonKind.FLOAT)

    def particle_count(self, pm_size: PmSize, channel: Channel) -> Optional[float]:
        key = 'p_%s_um%s' % (pm_size.value, channel.value)
        return get_optional_field(self._json, key, JsonKind.FLOAT)


class LanSensor:
    """A PurpleAir sensor reachable on the local network."""

    def __init__(self, hostname: str, port: int = 80, timeout: int = 10, live: bool = False):
        self.hostname = hostname
        self.port = port
        self.timeout = timeout
        self.live = live

    def __repr__(self):
        return 'LanSensor(%s:%d, live: %s)' % (self.hostname, self.port, self.live)

    @staticmethod
    def new_live_sensor(hostname: str, port: int = 80, timeout: int = 10) -> 'LanSensor':
        return LanSensor(hostname, port, timeout, live=True)

    @staticmethod
    def new_average_sensor(hostname: str, port: int = 80, timeout: int = 10) -> 'LanSensor':
        return LanSensor(hostname, port, timeout, live=False)

    def as_live(self) -> 'LanSensor':
        return LanSensor.new_live_sensor(self.hostname, self.port, self.timeout)

    def as_average(self) -> 'LanSensor':
        return LanSensor.new_average_sensor(self.hostname, self.port, self.timeout)

    def construct_url(self) -> str:
        url = 'http://%s:%s/json' % (self.hostname, self.port)
        if self.live:
            url += '?live=true'
        return url

    def get_measurement(self) -> LanMeasurement:
        """Fetch one reading.  requests exceptions propagate; no retries."""
        url = self.construct_url()
        log.debug('get_measurement: fetching from url: %s, timeout: %d' % (url, self.timeout))
        r = requests.get(url=url, timeout=self.timeout)
        r.raise_for_status()
        j = r.json()
        if not isinstance(j, dict):
            raise SchemaViolation('<document>', 'is not a JSON object, got: %r' % j)
        return LanMeasurement(j)


class Source:
    def __init__(self, config_dict, name, live):
        # Raise KeyError if name not in dictionary.
        source_dict = config_dict[name]
        self.enable = to_bool(source_dict.get('enable', False))
        self.sensor = LanSensor(
            hostname = source_dict.get('hostname', ''),
            port     = to_int(source_dict.get('port', 80)),
            timeout  = to_int(source_dict.get('timeout', 10)),
            live     = live)

@dataclass
class Configuration:
    lock        : threading.Lock
    measurement : Optional[Measurement] # Controlled by lock
    poll_secs   : int                   # Immutable
    fresh_secs  : int                   # Immutable
    sources     : List[Source]          # Immutable

def utc_now():
    return datetime.datetime.now(tz=tz.UTC)

def collect_data(sensor: LanSensor) -> Optional[Measurement]:
    try:
        measurement = sensor.get_measurement()
        # Read every field the loop packet needs, so a malformed reading is
        # rejected here rather than in new_loop_packet.
        measurement.timestamp()
        populate_packet(measurement, {})
        if measurement.channels_disagree():
            log.info('Ignoring reading from %s:%d--sensors disagree wildly: %r' % (
                sensor.hostname, sensor.port, measurement))
            return None
    except requests.exceptions.RequestException as e:
        log.info('collect_data: Attempt to fetch from: %s failed: %s.' % (sensor.hostname, e))
        return None
    except SchemaViolation as e:
        log.info('purpleair reading from %s not sane, %s' % (sensor.hostname, e))
        return None
    return measurement

def get_measurement(cfg: Configuration) -> Optional[Measurement]:
    for source in cfg.sources:
        if source.enable:
            measurement = collect_data(source.sensor)
            if measurement is not None:
                age_of_reading = utc_now().timestamp() - measurement.timestamp().timestamp()
                # The reading keeps aging until the next poll, so leave room
                # for poll_secs plus a 5s buffer.
                if abs(age_of_reading) > (cfg.fresh_secs - cfg.poll_secs - 5.0):
                    log.info('Ignoring reading from %s:%d--age: %d seconds.' % (
                        source.sensor.hostname, source.sensor.port, age_of_reading))
                    continue
                log.debug('get_measurement: measurement: %r' % measurement)
                return measurement
    log.error('Could not get reading from any source.')
    return None

def populate_packet(measurement: Measurement, packet: Dict[str, Any]) -> None:
    """Insert pm1_0, pm2_5, pm10_0, pm2_5_aqi and pm2_5_aqi_color into packet.

    pm2_5 is the EPA corrected value when both channels are present.  For
    single channel sensors, it is the ATM reading and the AQI is the one
    computed by the sensor.
    """
    pm1_0 = measurement.particulate_mass_avg(PmSize.PM1_0, PmType.ATM)
    if pm1_0 is not None:
        packet['pm1_0'] = pm1_0
    pm10_0 = measurement.particulate_mass_avg(PmSize.PM10_0, PmType.ATM)
    if pm10_0 is not None:
        packet['pm10_0'] = pm10_0

    pm2_5 = measurement.pm_2v5_epa_correction()
    if pm2_5 is not None:
        aqi = Measurement.get_aqi(pm2_5)
    else:
        pm2_5 = measurement.particulate_mass_avg(PmSize.PM2_5, PmType.ATM)
        aqi = measurement.pm_2v5_aqi(Channel.A)
    if pm2_5 is not None:
        packet['pm2_5'] = pm2_5
    if aqi is not None:
        packet['pm2_5_aqi'] = round(aqi)
        packet['pm2_5_aqi_color'] = compute_pm2_5_aqi_color(packet['pm2_5_aqi'])


class PurpleLan(StdService):
    """Collect PurpleAir air quality measurements over the LAN."""

    def __init__(self, engine, config_dict):
        super(PurpleLan, self).__init__(engine, config_dict)
        log.info("Service version is %s." % WEEWX_PURPLELAN_VERSION)

        self.engine = engine
        self.config_dict = config_dict.get('PurpleLan', {})

        poll_secs = to_int(self.config_dict.get('poll_secs', 15))
        live      = to_bool(self.config_dict.get('live', False))

        self.cfg = Configuration(
            lock        = threading.Lock(),
            measurement = None,
            poll_secs   = poll_secs,
            fresh_secs  = max(120, 3 * poll_secs),
            sources     = PurpleLan.configure_sources(self.config_dict, live))

        log.info('poll_secs : %d' % self.cfg.poll_secs)
        log.info('fresh_secs: %d' % self.cfg.fresh_secs)
        log.info('live      : %s' % live)
        source_count = 0
        for source in self.cfg.sources:
            if source.enable:
                source_count += 1
                log.info('Source %d for PurpleAir readings: %s, timeout: %d' % (
                    source_count, source.sensor.construct_url(), source.sensor.timeout))
        if source_count == 0:
            log.error('No sources configured for purplelan extension.  PurpleLan extension is inoperable.')
        else:
            weewx.xtypes.xtypes.insert(0, AQI())

            with self.cfg.lock:
                self.cfg.measurement = get_measurement(self.cfg)

            # Start a thread to poll the sensors and make readings available to loop packets.
            dp: DevicePoller = DevicePoller(self.cfg)
            t: threading.Thread = threading.Thread(target=dp.poll_device, name='PurpleLan', daemon=True)
            t.start()

            self.bind(weewx.NEW_LOOP_PACKET, self.new_loop_packet)

    def new_loop_packet(self, event):
        log.debug('new_loop_packet(%s)' % event)
        with self.cfg.lock:
            measurement = self.cfg.measurement
            if measurement is not None and \
                    measurement.timestamp().timestamp() + self.cfg.fresh_secs >= time.time():
                log.debug('Time of reading being inserted: %s' % timestamp_to_string(measurement.timestamp().timestamp()))
                populate_packet(measurement, event.packet)
            else:
                log.error('Found no fresh reading to insert.')

    @staticmethod
    def configure_sources(config_dict, live: bool) -> List[Source]:
        sources = []
        idx = 0
        while True:
            idx += 1
            try:
                source = Source(config_dict, 'Sensor%d' % idx, live)
                sources.append(source)
            except KeyError:
                break
        return sources

class DevicePoller:
    def __init__(self, cfg: Configuration):
        self.cfg = cfg

    def poll_device(self) -> None:
        log.debug('poll_device: start')
        while True:
            try:
                log.debug('poll_device: calling get_measurement.')
                measurement = get_measurement(self.cfg)
            except Exception as e:
                log.error('poll_device exception: %s' % e)
                weeutil.logger.log_traceback(log.critical, "    ****  ")
                measurement = None
            if measurement is not None:
                with self.cfg.lock:
                    self.cfg.measurement = measurement
            log.debug('poll_device: Sleeping for %d seconds.' % self.cfg.poll_secs)
            time.sleep(self.cfg.poll_secs)

class AQI(weewx.xtypes.XType):
    """
    AQI XType which computes the AQI (air quality index) from
    the pm2_5 value.
    """

    @staticmethod
    def get_scalar(obs_type, record, db_manager=None):
        if obs_type not in [ 'pm2_5_aqi', 'pm2_5_aqi_color' ]:
            raise weewx.UnknownType(obs_type)
        if record is None:
            log.debug('get_scalar called where record is None.')
            raise weewx.CannotCalculate(obs_type)
        if record.get('pm2_5') is None:
            # CannotCalculate makes the ImageGenerator bail, so use UnknownType.
            # Catchup records inserted at startup have no pm2_5.
            log.debug('get_scalar called where record has no pm2_5.')
            raise weewx.UnknownType(obs_type)
        try:
            value = round(Measurement.get_aqi(record['pm2_5']))
            if obs_type == 'pm2_5_aqi_color':
                value = compute_pm2_5_aqi_color(value)
            t, g = weewx.units.getStandardUnitType(record['usUnits'], obs_type)
            return weewx.units.ValueTuple(value, t, g)
        except KeyError:
            raise weewx.CannotCalculate(obs_type)

if __name__ == "__main__":
    usage = """%prog [options] [--help] [--debug]"""

    def main():
        import optparse

        parser = optparse.OptionParser(usage=usage)
        parser.add_option('--test-collector', dest='tc', action='store_true',
                          help='test the data collector')
        parser.add_option('--hostname', dest='hostname', action='store',
                          help='hostname to use with --test-collector')
        parser.add_option('--port', dest='port', action='store',
                          type=int, default=80,
                          help="port to use with --test-collector. Default is '80'")
        parser.add_option('--live', dest='live', action='store_true',
                          help='read live values rather than 2 minute averages')
        (options, args) = parser.parse_args()

        weeutil.logger.setup('purplelan', {})

        if options.tc:
            if not options.hostname:
                parser.error('--test-collector requires --hostname argument')
            test_collector(LanSensor(options.hostname, options.port, live=options.live))

    def test_collector(sensor: LanSensor):
        while True:
            measurement = collect_data(sensor)
            if measurement is not None:
                packet: Dict[str, Any] = {}
                populate_packet(measurement, packet)
                print('%s %s: %s' % (measurement.timestamp(), measurement.sensor_id(), packet))
            time.sleep(5)

    main()
