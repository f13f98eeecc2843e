# services/history_service.py
import collections
import numpy as np
from config import HISTORY_LENGTH, QUERY_TYPE_INTERVAL


class HistoryService:
    """Rolling per-attribute history used to draw chart series."""

    def __init__(self, history_length=HISTORY_LENGTH):
        self._streams = {}
        self.history_length = history_length

    def register_stream(self, ref):
        if ref not in self._streams:
            self._streams[ref] = {
                "timestamps": collections.deque(maxlen=self.history_length),
                "values": collections.deque(maxlen=self.history_length),
            }

    def add_data_point(self, ref, timestamp, value):
        """
        Numeric samples only; anything else is not chartable and is skipped.
        Samples not newer than the stream's last one are dropped, so re-fetched
        and re-pushed current values never repeat or go back in time.
        """
        if isinstance(value, bool):
            value = float(value)
        if not isinstance(value, (int, float)):
            return False
        self.register_stream(ref)
        timestamps = self._streams[ref]["timestamps"]
        if timestamps and timestamp <= timestamps[-1]:
            return False
        self._streams[ref]["timestamps"].append(timestamp)
        self._streams[ref]["values"].append(float(value))
        return True

    def add_event(self, event):
        return self.add_data_point(event.ref, event.timestamp, event.value)

    def drop_streams(self, keep_refs):
        keep = set(keep_refs)
        for ref in [r for r in self._streams if r not in keep]:
            del self._streams[ref]

    def get_stream_data(self, ref):
        stream = self._streams.get(ref)
        if stream is None:
            return np.array([]), np.array([])
        return np.array(stream["timestamps"], dtype=float), np.array(stream["values"], dtype=float)

    def query(self, ref, datapoint_query):
        """Applies the chart's datapoint query to one stream and returns (timestamps, values)."""
        timestamps, values = self.get_stream_data(ref)
        if datapoint_query.type != QUERY_TYPE_INTERVAL or len(timestamps) == 0:
            return timestamps, values
        return aggregate_intervals(timestamps, values, datapoint_query.interval, datapoint_query.formula)


def aggregate_intervals(timestamps, values, interval, formula):
    """
    Buckets samples into fixed-width windows starting at the first sample and
    reduces each bucket with AVG, MIN or MAX. Each bucket is stamped with its
    window start. Empty windows produce no point.
    """
    if len(timestamps) == 0 or interval <= 0:
        return timestamps, values
    reducers = {"AVG": np.mean, "MIN": np.min, "MAX": np.max}
    reduce = reducers.get(formula, np.mean)
    start = timestamps[0]
    buckets = np.floor((timestamps - start) / interval).astype(int)
    out_times, out_values = [], []
    for bucket in np.unique(buckets):
        mask = buckets == bucket
        out_times.append(start + bucket * interval)
        out_values.append(float(reduce(values[mask])))
    return np.array(out_times), np.array(out_values)
