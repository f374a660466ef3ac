class SmartCastError(Exception):
    """
    Base class for every error raised by this library.
    """

    pass


class TransportError(SmartCastError):
    """
    The device could not be reached, or the connection failed mid-request.
    """

    def __init__(self, message, exc=None):
        super(TransportError, self).__init__(message)
        self.exc = exc


class NoReachablePort(TransportError):
    """
    None of the candidate API ports answered.
    """

    def __init__(self, address, ports, exc=None):
        super(NoReachablePort, self).__init__(
            "No reachable API port on %s (tried %s)"
            % (address, ", ".join(str(p) for p in ports)),
            exc,
        )
        self.address = address
        self.ports = ports


class UnexpectedResponse(SmartCastError):
    """
    Got a response we didn't expect: malformed JSON, a missing field or a
    field of the wrong type.
    """

    pass


class DeviceNotFound(SmartCastError):
    """
    Discovery or a description lookup didn't yield a supported device.
    """

    pass


class APIError(SmartCastError):
    """
    The device explicitly rejected a request. `code` is the lower-cased
    STATUS.RESULT string returned by the device.
    """

    code = None
    description = "API error"

    def __init__(self, detail=None, code=None):
        if code is not None:
            self.code = code
        self.detail = detail
        message = self.description
        if detail:
            message = "%s (%s)" % (message, detail)
        super(APIError, self).__init__(message)


class UnrecognizedAPIError(APIError):
    """
    The device answered with a result string we have no name for. The raw
    RESULT and DETAIL are kept for diagnostics.
    """

    description = "Uncaught failure, could be an API bug"

    def __init__(self, result, detail):
        super(UnrecognizedAPIError, self).__init__(
            detail, code=str(result).lower() if result is not None else None
        )
        self.result = result

    def __str__(self):
        return "%s. Status result: %r, detail: %r" % (
            self.description,
            self.result,
            self.detail,
        )


class InvalidParameter(APIError):
    code = "invalid_parameter"
    description = "Invalid parameter"


class UriNotFound(APIError):
    code = "uri_not_found"
    description = "URI not found"


class MaxChallengesExceeded(APIError):
    code = "max_challenges_exceeded"
    description = "Too many failed pair attempts"


class PairingDenied(APIError):
    code = "pairing_denied"
    description = "Incorrect pin"


class ValueOutOfRange(APIError):
    code = "value_out_of_range"
    description = "Value out of range"


class ChallengeIncorrect(APIError):
    code = "challenge_incorrect"
    description = "Incorrect challenge"


class Blocked(APIError):
    code = "blocked"
    description = "Blocked, pairing may already be in progress"


class Failure(APIError):
    code = "failure"
    description = "Unknown command failure"


class Aborted(APIError):
    code = "aborted"
    description = "Unknown abort"


class Busy(APIError):
    code = "busy"
    description = "Device is busy"


class RequiresPairing(APIError):
    code = "requires_pairing"
    description = "Device requires pairing"


class RequiresSystemPin(APIError):
    code = "requires_system_pin"
    description = "Device requires system pin"


class RequiresNewSystemPin(APIError):
    code = "requires_new_system_pin"
    description = "Device requires new system pin"


class NetWifiNeedsValidSSID(APIError):
    code = "net_wifi_needs_valid_ssid"
    description = "Wifi needs SSID"


class NetWifiAlreadyConnected(APIError):
    code = "net_wifi_already_connected"
    description = "Wifi already connected"


class NetWifiMissingPassword(APIError):
    code = "net_wifi_missing_password"
    description = "Wifi needs password"


class NetWifiNotExisted(APIError):
    code = "net_wifi_not_existed"
    description = "Wifi network does not exist"


class NetWifiAuthRejected(APIError):
    code = "net_wifi_auth_rejected"
    description = "Wifi authentication rejected"


class NetWifiConnectTimeout(APIError):
    code = "net_wifi_connect_timeout"
    description = "Wifi connection timeout"


class NetWifiConnectAborted(APIError):
    code = "net_wifi_connect_aborted"
    description = "Wifi connection aborted"


class NetWifiConnection(APIError):
    code = "net_wifi_connection_error"
    description = "Wifi connection error"


class NetIPManualConfig(APIError):
    code = "net_ip_manual_config_error"
    description = "IP config error"


class NetIPDHCPFailed(APIError):
    code = "net_ip_dhcp_failed"
    description = "DHCP failure"


class NetUnknown(APIError):
    code = "net_unknown_error"
    description = "Unknown network error"


API_ERRORS = dict(
    (cls.code, cls)
    for cls in (
        InvalidParameter,
        UriNotFound,
        MaxChallengesExceeded,
        PairingDenied,
        ValueOutOfRange,
        ChallengeIncorrect,
        Blocked,
        Failure,
        Aborted,
        Busy,
        RequiresPairing,
        RequiresSystemPin,
        RequiresNewSystemPin,
        NetWifiNeedsValidSSID,
        NetWifiAlreadyConnected,
        NetWifiMissingPassword,
        NetWifiNotExisted,
        NetWifiAuthRejected,
        NetWifiConnectTimeout,
        NetWifiConnectAborted,
        NetWifiConnection,
        NetIPManualConfig,
        NetIPDHCPFailed,
        NetUnknown,
    )
)


def api_error(result, detail=None):
    """
    Build the exception matching a vendor STATUS.RESULT string. Matching is
    case-insensitive; anything unknown becomes an UnrecognizedAPIError.
    """
    code = result.lower() if isinstance(result, str) else None
    try:
        return API_ERRORS[code](detail)
    except KeyError:
        return UnrecognizedAPIError(result, detail)


class ValidationError(SmartCastError):
    """
    A setting write was rejected locally, before anything was sent.
    """

    pass


class ReadOnlySetting(ValidationError):
    """
    The setting is a menu, is read-only or has no current value to write over.
    """

    pass


class SettingTypeError(ValidationError):
    """
    The new value's type doesn't match the type of the setting's current value.
    """

    def __init__(self, current, new):
        super(SettingTypeError, self).__init__(
            "Type mismatch: current value is %r, new value is %r" % (current, new)
        )
        self.current = current
        self.new = new


class OutOfBounds(ValidationError):
    """
    The new value lies outside the slider's [minimum, maximum] range.
    """

    def __init__(self, value, minimum, maximum):
        super(OutOfBounds, self).__init__(
            "%r is out of bounds [%s, %s]" % (value, minimum, maximum)
        )
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class InvalidElement(ValidationError):
    """
    The new value isn't one of the list's elements.
    """

    def __init__(self, value, elements):
        super(InvalidElement, self).__init__(
            "%r is not a valid element (expected one of %s)"
            % (value, ", ".join(repr(e) for e in elements))
        )
        self.value = value
        self.elements = elements
