"""Vortex Lattice System

Pre-allocated storage for the variables of a vortex lattice method analysis.

The ``System`` is sized once for a given surface topology (number of surfaces, chordwise and spanwise panels of each
surface and number of chordwise wake panels) and then mutated in place by the influence coefficient assembly,
the linear solver and the post-processing routines.

Panel vectors such as ``gamma`` or ``w`` hold the panels of every surface. The surfaces are stored one after the
other in the order given at construction. Within a surface, the panels are flattened in column-major order so that
panel ``(i, j)`` (chordwise, spanwise) of surface ``i_surf`` is stored at ``offsets[i_surf] + i + j*nc``.
"""
import copy
import functools

import numpy as np

import vlmcore.utils.cout_utils as cout
import vlmcore.utils.exceptions as exceptions
import vlmcore.utils.settings as settings
from vlmcore.utils.constants import NDIM, NFREESTREAM, FLAT_ORDER, default_float_type
from vlmcore.aero.models.panels import grid_dtype, empty_grid


def is_single_surface(surfaces):
    """
    Returns ``True`` if ``surfaces`` is a single surface grid and ``False`` if it is a sequence of grids.
    """
    return isinstance(surfaces, np.ndarray) and surfaces.ndim == 2


def init_matrix_structure(dimensions, dtype, with_dim_dimension, added_size=0, fill_value=0.):
    matrix = []
    for i_surf in range(len(dimensions)):
        if with_dim_dimension:
            matrix.append(np.full((NDIM,
                                   dimensions[i_surf, 0] + added_size,
                                   dimensions[i_surf, 1] + added_size),
                                  fill_value,
                                  dtype=dtype))
        else:
            matrix.append(np.full((dimensions[i_surf, 0] + added_size,
                                   dimensions[i_surf, 1] + added_size),
                                  fill_value,
                                  dtype=dtype))
    return matrix


def init_record_structure(dimensions):
    grids = []
    for i_surf in range(len(dimensions)):
        grids.append(empty_grid((dimensions[i_surf, 0], dimensions[i_surf, 1])))
    return grids


def wake_dimensions(nwake, n_surf):
    """
    Returns the number of chordwise wake panels of each surface.

    Args:
        nwake (int or np.ndarray): Number of chordwise wake panels, common to all surfaces or one per surface
        n_surf (int): Number of surfaces

    Raises:
        exceptions.WakeDimensionsMismatch: if one value per surface is given and their number is not ``n_surf``
        exceptions.NotValidSettingType: if any value is not a whole number or the values are nested
        exceptions.NotValidSetting: if any value is negative
    """
    try:
        values = np.asarray(nwake)
    except ValueError:
        raise exceptions.NotValidSettingType('nwake', nwake, ['int', 'list(int)'])
    is_real = np.issubdtype(values.dtype, np.integer) or np.issubdtype(values.dtype, np.floating)
    if values.ndim > 1 or not is_real \
            or not np.all(np.isfinite(values)) or np.any(values.astype(int) != values):
        # whole numbers only, never truncated
        raise exceptions.NotValidSettingType('nwake', nwake, ['int', 'list(int)'])

    if values.ndim == 0:
        nw = np.full((n_surf, ), values, dtype=int)
    else:
        nw = values.astype(int)
        if len(nw) != n_surf:
            raise exceptions.WakeDimensionsMismatch(n_surf, len(nw))

    if np.any(nw < 0):
        raise exceptions.NotValidSetting('nwake', nwake, 'non-negative integers')
    return nw


class System(object):
    """
    Contains pre-allocated storage for the vortex lattice system variables.

    It can be created for a single surface, given as a grid of surface panels of shape ``(nc, ns)`` where ``nc`` is
    the number of chordwise panels and ``ns`` the number of spanwise panels, or for a list of surfaces, each with its
    own shape. The single surface form is only recognised for a 2-D ``numpy.ndarray``. Any other iterable, nested
    lists included, is read as a list of surfaces.

    The precision of the storage is given by ``dtype`` and defaults to the promoted precision of the surface panels.
    Every array and panel record stored in the system must have this precision.

    Attributes:
        dtype (np.dtype): Floating point type of all the system variables
        n_surf (int): Number of surfaces
        N (int): Total number of surface panels
        single_surface (bool): ``True`` if the system was created from a single surface grid
        dimensions (np.ndarray): Surface panels of each surface ``[n_surf x 2]`` (chordwise, spanwise)
        dimensions_star (np.ndarray): Wake panels of each surface ``[n_surf x 2]`` (chordwise, spanwise)
        offsets (np.ndarray): Position of the first panel of each surface in the panel vectors ``[n_surf + 1]``.
          The last entry is ``N``.

        AIC (np.ndarray): Aerodynamic influence coefficient matrix of the surface panels ``[N x N]``
        w (np.ndarray): Normal velocity at the control points from external sources and wakes ``[N]``
        gamma (np.ndarray): Circulation strength of the surface panels ``[N]``. Also available as ``Γ``.
        V (list(np.ndarray)): Velocity at the wake vertices ``[n_surf][3 x (nwake + 1) x (ns + 1)]``
        panels (list(np.ndarray)): Panel properties ``[n_surf][nc x ns]``
        wakes (list(np.ndarray)): Wake panels ``[n_surf][nwake x ns]``
        trefftz (list(np.ndarray)): Trefftz plane panels ``[n_surf][ns]``
        dw (tuple(np.ndarray)): Derivatives of ``w`` with respect to the freestream variables ``(5)[N]``
        dgamma (tuple(np.ndarray)): Derivatives of ``gamma`` with respect to the freestream variables ``(5)[N]``.
          Also available as ``dΓ``.
        dpanels (tuple(list(np.ndarray))): Derivatives of the panel properties with respect to the freestream
          variables ``(5)[n_surf][nc x ns]``
        wake_shedding_locations (list(np.ndarray)): Wake shedding locations ``[n_surf][3 x (ns + 1)]``
        dgamma_dt (np.ndarray): Derivative of ``gamma`` with respect to non-dimensional time ``[N]``. Also available
          as ``dΓdt``.

    ``AIC``, ``w``, ``gamma``, ``dw``, ``dgamma`` and ``dgamma_dt`` are initialised to zero. The panel record grids
    (``panels``, ``wakes``, ``trefftz`` and ``dpanels``) hold ``None`` until the solver writes them. ``V`` and
    ``wake_shedding_locations`` are zero, or ``NaN`` if ``poison_uninitialised`` is set, until computed.

    The derivative slots are always allocated, but they only hold meaningful values once the solver has computed
    the derivatives.

    Args:
        surfaces (np.ndarray or list(np.ndarray)): Surface panel grid or list of surface panel grids
        dtype: Floating point type. Defaults to the precision of ``surfaces``
        nwake (int or list(int)): Number of chordwise wake panels. Overrides the value in ``custom_settings``.
        custom_settings (dict): System settings

    """
    settings_types = dict()
    settings_default = dict()
    settings_description = dict()

    settings_types['nwake'] = ['int', 'list(int)']
    settings_default['nwake'] = 0
    settings_description['nwake'] = 'Number of chordwise wake panels. A single value is used for every surface, ' \
                                    'a list gives the value of each surface'

    settings_types['poison_uninitialised'] = 'bool'
    settings_default['poison_uninitialised'] = False
    settings_description['poison_uninitialised'] = 'Fill the wake vertex velocities and the wake shedding ' \
                                                   'locations with ``NaN`` until they are computed'

    settings_table = settings.SettingsTable()
    __doc__ += settings_table.generate(settings_types, settings_default, settings_description)

    def __init__(self, surfaces, dtype=None, nwake=None, custom_settings=None):
        if custom_settings is None:
            self.settings = dict()
        else:
            self.settings = dict(custom_settings)
        if nwake is not None:
            self.settings['nwake'] = nwake
        settings.to_custom_types(self.settings, self.settings_types, self.settings_default)

        self.single_surface = is_single_surface(surfaces)
        if self.single_surface:
            surfaces = [surfaces]
        else:
            surfaces = [np.asarray(surface) for surface in surfaces]
            for i_surf, surface in enumerate(surfaces):
                if surface.ndim != 2:
                    raise ValueError('Surface %u is not a 2-D grid of panels, its shape is %s. '
                                     'A single surface must be given as a 2-D numpy.ndarray, not as nested lists'
                                     % (i_surf, surface.shape))
        self.n_surf = len(surfaces)

        self.dimensions = np.array([surface.shape for surface in surfaces], dtype=int).reshape((self.n_surf, 2))
        self.dimensions_star = self.dimensions.copy()
        self.dimensions_star[:, 0] = wake_dimensions(self.settings['nwake'], self.n_surf)

        if dtype is None:
            dtype = default_float_type
            if self.n_surf:
                dtype = functools.reduce(np.promote_types, [grid_dtype(surface) for surface in surfaces])
        self.dtype = np.dtype(dtype)
        if not np.issubdtype(self.dtype, np.inexact):
            raise exceptions.NotValidSettingType('dtype', self.dtype, ['float', 'complex'])

        self.offsets = np.zeros((self.n_surf + 1, ), dtype=int)
        self.offsets[1:] = np.cumsum(self.dimensions[:, 0]*self.dimensions[:, 1])
        self.N = int(self.offsets[-1])

        self.allocate()
        self.output_info()

    def allocate(self):
        N = self.N
        dtype = self.dtype
        if self.settings['poison_uninitialised']:
            fill_value = np.nan
        else:
            fill_value = 0.

        self.AIC = np.zeros((N, N), dtype=dtype)
        self.w = np.zeros((N, ), dtype=dtype)
        self.gamma = np.zeros((N, ), dtype=dtype)

        # velocity at the wake vertices
        self.V = init_matrix_structure(self.dimensions_star, dtype, True, added_size=1, fill_value=fill_value)

        self.panels = init_record_structure(self.dimensions)
        self.wakes = init_record_structure(self.dimensions_star)
        self.trefftz = []
        for i_surf in range(self.n_surf):
            self.trefftz.append(empty_grid((self.dimensions[i_surf, 1], )))

        # derivatives with respect to the freestream variables
        self.dw = tuple(np.zeros((N, ), dtype=dtype) for i_der in range(NFREESTREAM))
        self.dgamma = tuple(np.zeros((N, ), dtype=dtype) for i_der in range(NFREESTREAM))
        self.dpanels = tuple(init_record_structure(self.dimensions) for i_der in range(NFREESTREAM))

        self.wake_shedding_locations = []
        for i_surf in range(self.n_surf):
            self.wake_shedding_locations.append(np.full((NDIM, self.dimensions[i_surf, 1] + 1),
                                                        fill_value,
                                                        dtype=dtype))

        self.dgamma_dt = np.zeros((N, ), dtype=dtype)

    @classmethod
    def from_config_file(cls, surfaces, file_name, dtype=None):
        """
        Creates a ``System`` with the settings in the ``[System]`` section of a ``configobj`` file.

        Args:
            surfaces (np.ndarray or list(np.ndarray)): Surface panel grid or list of surface panel grids
            file_name (str): Path to the settings file
            dtype: Floating point type. Defaults to the precision of ``surfaces``
        """
        config = settings.load_config_file(file_name)
        try:
            custom_settings = dict(config['System'])
        except KeyError:
            cout.cout_wrap('No System section in %s, using the default settings' % file_name, 3)
            custom_settings = dict()
        return cls(surfaces, dtype=dtype, custom_settings=custom_settings)

    @property
    def Γ(self):
        return self.gamma

    @property
    def dΓ(self):
        return self.dgamma

    @property
    def dΓdt(self):
        return self.dgamma_dt

    def output_info(self):
        cout.cout_wrap('The vortex lattice system contains %u surfaces (%s)' % (self.n_surf, self.dtype), 1)
        table = cout.TablePrinter(n_fields=5, field_length=8, field_types=['d']*5)
        table.print_header(['Surface', 'M', 'N', 'M wake', 'Offset'])
        for i_surf in range(self.n_surf):
            table.print_line([i_surf,
                              int(self.dimensions[i_surf, 0]),
                              int(self.dimensions[i_surf, 1]),
                              int(self.dimensions_star[i_surf, 0]),
                              int(self.offsets[i_surf])])
        table.print_divider_line()
        cout.cout_wrap('  In total: %u bound panels' % self.N)
        cout.cout_wrap('  In total: %u wake panels' % np.sum(self.dimensions_star[:, 0]*self.dimensions_star[:, 1]))

    def surface_slice(self, i_surf):
        """
        Returns the slice of the panel vectors (``gamma``, ``w``, ...) associated to surface ``i_surf``
        """
        if not 0 <= i_surf < self.n_surf:
            raise IndexError('Surface %d out of range, the system has %u surfaces' % (i_surf, self.n_surf))
        return slice(int(self.offsets[i_surf]), int(self.offsets[i_surf + 1]))

    def flat_index(self, i_surf, i, j):
        """
        Returns the position in the panel vectors of the chordwise panel ``i``, spanwise panel ``j`` of surface
        ``i_surf``
        """
        self.surface_slice(i_surf)
        nc, ns = self.dimensions[i_surf]
        if not (0 <= i < nc and 0 <= j < ns):
            raise IndexError('Panel (%d, %d) out of range for surface %u of shape (%u, %u)' % (i, j, i_surf, nc, ns))
        return int(self.offsets[i_surf]) + i + j*int(nc)

    def unflatten(self, vector, i_surf=None):
        """
        Returns views of a panel vector with the shape of the surface grids.

        Args:
            vector (np.ndarray): Panel vector ``[N]``, such as ``gamma`` or one of ``dgamma``
            i_surf (int): Surface. If ``None``, the views of every surface are returned in a list

        Returns:
            np.ndarray or list(np.ndarray): ``[nc x ns]`` view(s) sharing memory with ``vector``
        """
        if len(vector) != self.N:
            raise ValueError('Vector of length %u does not match the %u panels of the system' % (len(vector),
                                                                                                  self.N))
        if i_surf is None:
            return [self.unflatten(vector, i) for i in range(self.n_surf)]

        surface = self.surface_slice(i_surf)
        nc, ns = self.dimensions[i_surf]
        return vector[surface].reshape((nc, ns), order=FLAT_ORDER)

    def panel_grids(self, i_der=None):
        """
        Returns the baseline panel properties grids if ``i_der`` is ``None``, else those of derivative slot ``i_der``
        """
        if i_der is None:
            return self.panels
        if not 0 <= i_der < NFREESTREAM:
            raise IndexError('Derivative slot %d out of range [0, %u)' % (i_der, NFREESTREAM))
        return self.dpanels[i_der]

    def set_panel_properties(self, i_surf, i, j, properties, i_der=None):
        """
        Stores the properties of a panel.

        Args:
            i_surf (int): Surface
            i (int): Chordwise panel
            j (int): Spanwise panel
            properties (vlmcore.aero.models.panels.PanelProperties): Panel properties
            i_der (int): Derivative slot. If ``None`` the properties are stored in ``panels``, else in
              ``dpanels[i_der]``

        Raises:
            exceptions.NarrowingPrecisionError: if ``properties`` has a wider precision than the system
        """
        grids = self.panel_grids(i_der)
        self.flat_index(i_surf, i, j)
        if properties.dtype != self.dtype:
            properties = properties.astype(self.dtype)
        grids[i_surf][i, j] = properties

    def panel_properties_computed(self, i_der=None):
        """
        Returns ``True`` if the properties of every panel have been stored, in ``panels`` or in ``dpanels[i_der]``
        """
        for grid in self.panel_grids(i_der):
            for record in grid.flat:
                if record is None:
                    return False
        return True

    def reset(self):
        """
        Resets the system variables in place to their values after construction
        """
        if self.settings['poison_uninitialised']:
            fill_value = np.nan
        else:
            fill_value = 0.

        self.AIC[:] = 0.
        self.w[:] = 0.
        self.gamma[:] = 0.
        self.dgamma_dt[:] = 0.
        for i_der in range(NFREESTREAM):
            self.dw[i_der][:] = 0.
            self.dgamma[i_der][:] = 0.
            for grid in self.dpanels[i_der]:
                grid[...] = None

        for i_surf in range(self.n_surf):
            self.V[i_surf][:] = fill_value
            self.wake_shedding_locations[i_surf][:] = fill_value
            self.panels[i_surf][...] = None
            self.wakes[i_surf][...] = None
            self.trefftz[i_surf][...] = None

    def copy(self):
        """
        Returns a deep copy of the system, with the same topology and precision
        """
        return copy.deepcopy(self)


def get_panel_properties(system, surfaces):
    """
    Returns the panel properties stored in ``system``.

    Args:
        system (System): Vortex lattice system
        surfaces (np.ndarray or list(np.ndarray)): Surface panel grid or list of grids used to create ``system``

    Returns:
        np.ndarray or list(np.ndarray): The panel properties grid if ``surfaces`` is a single grid, else the list of
        panel properties grids of all surfaces. They are not copies.
    """
    if is_single_surface(surfaces):
        return system.panels[0]
    return system.panels
