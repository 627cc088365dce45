# Recorder client package
from dialtester.recorder.controller import Recorder, RecordingState, CompletedRecording
from dialtester.recorder.dashboard import DashboardPoller, DashboardSnapshot
from dialtester.recorder.gateway_client import GatewayClient, GatewayError, GatewayValidationError
from dialtester.recorder.sampler import DialSampler, Sample, TrackBounds, position_to_value
from dialtester.recorder.timer import SessionTimer, TimerState, format_elapsed
from dialtester.recorder.write_queue import WriteQueue

__all__ = [
    "Recorder",
    "RecordingState",
    "CompletedRecording",
    "DashboardPoller",
    "DashboardSnapshot",
    "GatewayClient",
    "GatewayError",
    "GatewayValidationError",
    "DialSampler",
    "Sample",
    "TrackBounds",
    "position_to_value",
    "SessionTimer",
    "TimerState",
    "format_elapsed",
    "WriteQueue",
]
