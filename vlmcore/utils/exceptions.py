"""vlmcore Exception Classes
"""
import vlmcore.utils.cout_utils as cout


class DefaultValueBaseException(Exception):
    def __init__(self, variable, value, message=''):
        super().__init__(message)
        self.variable = variable
        self.value = value

    def output_message(self, message, color_id=3):
        if cout.cout_wrap is None:
            print(message)
        else:
            cout.cout_wrap.print_separator(3)
            cout.cout_wrap(message, color_id)
            cout.cout_wrap.print_separator(3)


class NoDefaultValueException(DefaultValueBaseException):
    def __init__(self, variable, value=None, message=''):
        message = message or 'The variable ' + variable + ' has no default value, please indicate one'
        super().__init__(variable, value, message=message)
        self.output_message(message)


class NotValidSetting(DefaultValueBaseException):
    """
    Raised when a user gives a setting an invalid value
    """

    def __init__(self, setting, variable, options, message=''):
        message = 'The setting %s with entry %s is not one of the valid options: %s' % (setting, variable, options)
        super().__init__(setting, variable, message=message)
        self.output_message(message, color_id=4)


class NotValidSettingType(DefaultValueBaseException):
    """
    Raised when a user gives a setting with an invalid type
    """

    def __init__(self, setting, variable, data_types, message=''):
        message = 'The setting %s with entry %s is not one of the valid types: %s' % (setting, variable, data_types)
        super().__init__(setting, variable, message=message)
        self.output_message(message, color_id=4)


class NotRecognisedSetting(DefaultValueBaseException):
    """
    Raised when a setting is not recognised
    """
    def __init__(self, setting, value=None, message=''):
        message = 'Unrecognised setting {:s}. Please check input file and/or documentation'.format(setting)
        super().__init__(variable=setting, value=value, message=message)
        self.output_message(message, color_id=4)


class WakeDimensionsMismatch(ValueError):
    """
    Raised when the number of per-surface wake depths does not match the number of surfaces.

    It is raised before any storage is allocated.
    """
    def __init__(self, n_surf, n_wake):
        message = 'Wake depth given for %u surfaces but the system has %u surfaces' % (n_wake, n_surf)
        super().__init__(message)
        self.n_surf = n_surf
        self.n_wake = n_wake
        cout.cout_wrap(message, 4)


class NarrowingPrecisionError(TypeError):
    """
    Raised when storing data would silently narrow its floating point precision
    """
    def __init__(self, from_dtype, to_dtype):
        message = 'Cannot store %s data in a %s container without losing precision' % (from_dtype, to_dtype)
        super().__init__(message)
        self.from_dtype = from_dtype
        self.to_dtype = to_dtype
        cout.cout_wrap(message, 4)
