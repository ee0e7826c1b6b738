"""Internal constants shared across the library."""

BASE_URL = "https://api.home-connect.com"
API_MEDIA_TYPE = "application/vnd.bsh.sdk.v1+json"
EVENT_STREAM_MEDIA_TYPE = "text/event-stream"

# ------------------------------------------------------------------
# Item keys
# ------------------------------------------------------------------

#: Sentinel item published on every connectivity change.
CONNECTED_KEY = "connected"

OPERATION_STATE_KEY = "BSH.Common.Status.OperationState"
POWER_STATE_KEY = "BSH.Common.Setting.PowerState"
LOCAL_CONTROL_ACTIVE_KEY = "BSH.Common.Status.LocalControlActive"
REMOTE_CONTROL_ACTIVE_KEY = "BSH.Common.Status.RemoteControlActive"
REMOTE_START_ALLOWED_KEY = "BSH.Common.Status.RemoteControlStartAllowed"
SELECTED_PROGRAM_KEY = "BSH.Common.Root.SelectedProgram"
ACTIVE_PROGRAM_KEY = "BSH.Common.Root.ActiveProgram"

PAUSE_PROGRAM_COMMAND = "BSH.Common.Command.PauseProgram"
RESUME_PROGRAM_COMMAND = "BSH.Common.Command.ResumeProgram"
OPEN_DOOR_COMMAND = "BSH.Common.Command.OpenDoor"
PARTLY_OPEN_DOOR_COMMAND = "BSH.Common.Command.PartlyOpenDoor"

# ------------------------------------------------------------------
# Transport error codes treated as "no such state" rather than failures
# ------------------------------------------------------------------

UNSUPPORTED_SETTING_CODES: frozenset[str] = frozenset({"SDK.Error.UnsupportedSetting", "SDK.Simulator.InternalError"})
WRONG_OPERATION_STATE_CODES: frozenset[str] = frozenset({"SDK.Error.WrongOperationState"})
NO_PROGRAM_SELECTED_CODES: frozenset[str] = frozenset({"SDK.Error.NoProgramSelected"})
NO_PROGRAM_ACTIVE_CODES: frozenset[str] = frozenset({"SDK.Error.NoProgramActive"})
COMMANDS_UNSUPPORTED_CODES: frozenset[str] = frozenset({"404"})

# ------------------------------------------------------------------
# Event stream
# ------------------------------------------------------------------

KEEP_ALIVE_EVENT = "KEEP-ALIVE"
