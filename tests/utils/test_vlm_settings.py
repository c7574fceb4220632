import vlmcore.utils.settings as settings
import vlmcore.utils.exceptions as exceptions
import vlmcore.utils.cout_utils as cout
import numpy as np
import os
import tempfile
import unittest


class TestSettings(unittest.TestCase):
    """
    Tests the settings utilities module
    """

    def setUp(self):
        cout.cout_quiet()

    def test_settings_to_custom_types(self):
        in_dict = dict()
        types_dict = dict()
        default_dict = dict()

        in_dict['integer_var'] = '1234'
        types_dict['integer_var'] = 'int'
        default_dict['integer_var'] = 0

        in_dict['bool_var'] = 'on'
        types_dict['bool_var'] = 'bool'
        default_dict['bool_var'] = False

        in_dict['int_list_var'] = '1, 2, 3'
        types_dict['int_list_var'] = 'list(int)'
        default_dict['int_list_var'] = np.array([0, 1])

        # assigned values test
        settings.to_custom_types(in_dict, types_dict, default_dict)
        self.assertEqual(in_dict['integer_var'], 1234, 'Integer test for assigned values not passed')
        self.assertEqual(in_dict['bool_var'], True, 'Bool test for assigned values not passed')
        np.testing.assert_array_equal(in_dict['int_list_var'], np.array([1, 2, 3]))

        # default values test
        in_default_dict = dict()
        settings.to_custom_types(in_default_dict, types_dict, default_dict)
        self.assertEqual(in_default_dict['integer_var'], default_dict['integer_var'],
                         'Integer test for default values not passed')
        self.assertEqual(in_default_dict['bool_var'], default_dict['bool_var'],
                         'Bool test for default values not passed')
        np.testing.assert_array_equal(in_default_dict['int_list_var'], default_dict['int_list_var'])

    def test_scalar_or_list_setting(self):
        types_dict = {'nwake': ['int', 'list(int)']}
        default_dict = {'nwake': 0}

        in_dict = {'nwake': '3'}
        settings.to_custom_types(in_dict, types_dict, default_dict)
        self.assertEqual(in_dict['nwake'], 3)

        in_dict = {'nwake': ['1', '2']}
        settings.to_custom_types(in_dict, types_dict, default_dict)
        np.testing.assert_array_equal(in_dict['nwake'], np.array([1, 2]))

        in_dict = {'nwake': (4, 5, 6)}
        settings.to_custom_types(in_dict, types_dict, default_dict)
        np.testing.assert_array_equal(in_dict['nwake'], np.array([4, 5, 6]))

        in_dict = dict()
        settings.to_custom_types(in_dict, types_dict, default_dict)
        self.assertEqual(in_dict['nwake'], 0)

    def test_invalid_settings(self):
        types_dict = {'integer_var': 'int'}
        default_dict = {'integer_var': 0}

        with self.assertRaises(exceptions.NotRecognisedSetting):
            settings.to_custom_types({'not_a_setting': 1}, types_dict, default_dict)

        with self.assertRaises(exceptions.NotValidSettingType):
            settings.to_custom_types({'integer_var': 'one'}, types_dict, default_dict)

        with self.assertRaises(exceptions.NoDefaultValueException):
            settings.to_custom_types(dict(), types_dict, {'integer_var': None})

    def test_str2bool(self):
        for value in ['off', 'False', 'no', '0', '', False]:
            self.assertFalse(settings.str2bool(value))
        for value in ['on', 'True', 'yes', '1', True]:
            self.assertTrue(settings.str2bool(value))

    def test_integers_are_not_truncated(self):
        self.assertEqual(settings.str2int(' 7 '), 7)
        self.assertEqual(settings.str2int(3.0), 3)
        self.assertEqual(settings.str2int(np.int32(4)), 4)
        for value in [2.7, '2.7', np.nan, True]:
            with self.assertRaises(ValueError):
                settings.str2int(value)

        np.testing.assert_array_equal(settings.list2int('[1 2 3]'), np.array([1, 2, 3]))
        with self.assertRaises(ValueError):
            settings.list2int([1.9, 0.5])
        with self.assertRaises(ValueError):
            settings.list2int([[1, 2]])

        types_dict = {'nwake': ['int', 'list(int)']}
        default_dict = {'nwake': 0}
        for value in [2.7, [1.9, 0.5], [[1, 2]], np.array([1., np.inf])]:
            with self.assertRaises(exceptions.NotValidSettingType):
                settings.to_custom_types({'nwake': value}, types_dict, default_dict)

    def test_load_config_file(self):
        with tempfile.TemporaryDirectory() as folder:
            file_name = os.path.join(folder, 'case.cfg')
            with open(file_name, 'w') as f:
                f.write('[System]\n')
                f.write('nwake = 2, 3\n')
                f.write('poison_uninitialised = on\n')

            config = settings.load_config_file(file_name)

        self.assertEqual(config['System']['nwake'], ['2', '3'])
        self.assertEqual(config['System']['poison_uninitialised'], 'on')

    def test_settings_table(self):
        types_dict = {'nwake': ['int', 'list(int)'], 'poison_uninitialised': 'bool'}
        default_dict = {'nwake': 0, 'poison_uninitialised': False}
        description_dict = {'nwake': 'Number of chordwise wake panels'}

        table = settings.SettingsTable().generate(types_dict, default_dict, description_dict)

        self.assertIn('``nwake``', table)
        self.assertIn('Number of chordwise wake panels', table)
        self.assertIn('``poison_uninitialised``', table)
        self.assertIn('``False``', table)


if __name__ == '__main__':
    unittest.main()
