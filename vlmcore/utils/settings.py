"""
Settings Generator Utilities
"""
import numpy as np
import vlmcore.utils.exceptions as exceptions
import vlmcore.utils.cout_utils as cout


def cast(k, v, data_type):
    if data_type == 'list(int)':
        pytype = list2int
    else:
        pytype = scalar_types[data_type]
    try:
        val = pytype(v)
    except (TypeError, ValueError, OverflowError):
        raise exceptions.NotValidSettingType(k, v, data_type)
    return val


def to_custom_types(dictionary, types, default):
    """
    Casts in place the entries of ``dictionary`` to the types given in ``types``, filling the missing ones with
    the values in ``default``.

    A setting type can be given as a list of options (for instance ``['int', 'list(int)']``) when the setting may
    take either a scalar or a list.

    Args:
        dictionary (dict): Settings as given by the user
        types (dict): Settings types, one of ``int``, ``bool`` and ``list(int)``
        default (dict): Settings default values

    Raises:
        exceptions.NotRecognisedSetting: if ``dictionary`` contains a setting not present in ``types``
        exceptions.NotValidSettingType: if a setting cannot be cast to its type
    """
    for k in dictionary.keys():
        if k not in types:
            raise exceptions.NotRecognisedSetting(k, dictionary[k])

    for k, v in types.items():
        if type(v) != list:
            data_type = v
        elif k in dictionary:
            data_type = get_data_type_for_several_options(dictionary[k], v, k)
        else:
            # Choose first data type in list for default value
            data_type = v[0]
        dictionary[k] = get_custom_type(dictionary, data_type, k, default)


def get_data_type_for_several_options(dict_value, list_settings_types, setting_name):
    """
    Checks the data type of the setting input in case of several data type options.
    Only a scalar or list can be the case for these cases.

    Raises:
        exceptions.NotValidSettingType: if the value matches none of the types.
    """
    for data_type in list_settings_types:
        if 'list' in data_type and (type(dict_value) in (list, tuple) or not np.isscalar(dict_value)):
            return data_type
        elif 'list' not in data_type and np.isscalar(dict_value):
            return data_type
    raise exceptions.NotValidSettingType(setting_name, dict_value, list_settings_types)


def get_default_value(default_value, k, v):
    if default_value is None:
        raise exceptions.NoDefaultValueException(k)
    converted_value = cast(k, default_value, v)
    notify_default_value(k, converted_value)
    return converted_value


def get_custom_type(dictionary, v, k, default):
    if v not in scalar_types and v != 'list(int)':
        raise TypeError('Variable %s has an unknown type (%s) that cannot be casted' % (k, v))

    try:
        value = dictionary[k]
    except KeyError:
        return get_default_value(default[k], k, v)

    return cast(k, value, v)


def str2int(value):
    """
    Converts ``value`` to ``int`` without truncating it.

    Raises:
        ValueError: if ``value`` is not a whole number
    """
    if isinstance(value, (bool, np.bool_)):
        raise ValueError('%s is not an integer' % value)
    if isinstance(value, str):
        return int(value.strip())
    integer = int(value)
    if integer != value:
        raise ValueError('%s is not an integer' % value)
    return integer


def list2int(value):
    """
    Converts a flat list of values, or a string of comma or whitespace separated values, to an array of ``int``.

    Raises:
        ValueError: if any item is not a whole number or the list is nested
    """
    if isinstance(value, str):
        value = value.strip('[]')
        if value.find(',') < 0:
            items = value.split()
        else:
            items = [item for item in value.split(',') if item.strip()]
    else:
        items = np.asarray(value, dtype=object)
        if items.ndim != 1:
            raise ValueError('%s is not a flat list' % (value, ))
    return np.array([str2int(item) for item in items], dtype=int)


def str2bool(string):
    false_list = ['false', 'off', '0', 'no']
    if isinstance(string, (bool, np.bool_)):
        return bool(string)

    if not string:
        return False
    elif str(string).lower() in false_list:
        return False
    else:
        return True


scalar_types = {'int': str2int, 'bool': str2bool}


def load_config_file(file_name: str) -> dict:
    """This function reads a settings file.

    Args:
        file_name (str): contains the path and file name of the file to be read by the ``configobj``
            reader.

    Returns:
        config (dict): a ``ConfigObj`` object that behaves like a dictionary
    """
    import configobj
    dict_config = configobj.ConfigObj(file_name, file_error=True)
    return dict_config


def notify_default_value(k, v):
    cout.cout_wrap('Variable ' + k + ' has no assigned value in the settings.')
    cout.cout_wrap('    will default to the value: ' + str(v), 1)


class SettingsTable:
    """
    Generates the documentation's setting table at runtime.

    This class produces a table in reStructuredText format with the settings of a class and adds it to its
    docstring. If no description is given for a setting it will be left blank.

    Examples:
        The end of the class declaration should contain

        .. code-block:: python

            settings_table = settings.SettingsTable()
            __doc__ += settings_table.generate(settings_types, settings_default, settings_description)

    """
    titles = ['Name', 'Type', 'Description', 'Default']

    def __init__(self):
        self.n_fields = len(self.titles)
        self.field_length = [0] * self.n_fields
        self.line_format = ''
        self.table_string = ''

    def generate(self, settings_types, settings_default, settings_description):
        """
        Returns a rst-format table with the settings' names, types, description and default values

        Args:
            settings_types (dict): Setting types.
            settings_default (dict): Settings default value.
            settings_description (dict): Setting description.

        Returns:
            str: .rst formatted string with a table containing the settings' information.
        """
        rows = []
        for setting in settings_types:
            rows.append(['``' + setting + '``',
                         '``' + str(settings_types[setting]) + '``',
                         settings_description.get(setting, ''),
                         '``' + str(settings_default.get(setting, '')) + '``'])

        for i_field in range(self.n_fields):
            lengths = [len(row[i_field]) for row in rows] + [len(self.titles[i_field])]
            self.field_length[i_field] = max(lengths) + 2  # add the two spaces as column dividers
        self.line_format = ''.join('{0[%u]:<%u}' % (i_field, self.field_length[i_field])
                                   for i_field in range(self.n_fields))

        divider = ''.join('='*(length - 2) + '  ' for length in self.field_length) + '\n'
        table_string = '\n    The settings that this class accepts are given by a dictionary, ' \
                       'with the following key-value pairs:\n'
        table_string += '\n    ' + divider
        table_string += '    ' + self.line_format.format(self.titles) + '\n'
        table_string += '    ' + divider
        for row in rows:
            table_string += '    ' + self.line_format.format(row) + '\n'
        table_string += '    ' + divider

        self.table_string = table_string
        return table_string
