import numpy as np

NDIM = int(3)

# number of freestream parameters with an associated derivative slot
NFREESTREAM = int(5)

# flattening of a surface grid (nc, ns) into the global panel vectors:
# chordwise index runs fastest
FLAT_ORDER = 'F'

default_float_type = np.float64
