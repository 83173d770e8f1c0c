"""
Definitions and meta data of fields
"""

field_metadata = {}
"""
Dictionary that contains the meta data of each field.

Required meta data entries are:

- **name**: human readable description
- **shortname**: description used in visualization etc
- **unit**: SI unit of the field
- **filename**: filename for output files

The naming convention for field keys is snake_case: ``field_name_1d``
"""

field_metadata['z_coord_1d'] = {
    'name': 'Cell center z coordinates',
    'shortname': 'Z coordinates',
    'unit': 'm',
    'filename': 'ZCoord1d',
}
field_metadata['dz_1d'] = {
    'name': 'Cell thickness',
    'shortname': 'Cell thickness',
    'unit': 'm',
    'filename': 'CellThickness1d',
}
field_metadata['uv_1d'] = {
    'name': 'Horizontal velocity',
    'shortname': 'Velocity',
    'unit': 'm s-1',
    'filename': 'Velocity1d',
}
field_metadata['sediment_1d'] = {
    'name': 'Suspended sediment concentration',
    'shortname': 'Concentration',
    'unit': 'kg m-3',
    'filename': 'Sediment1d',
}
field_metadata['tke_1d'] = {
    'name': 'Turbulent kinetic energy',
    'shortname': 'TKE',
    'unit': 'm2 s-2',
    'filename': 'TurbKEnergy1d',
}
field_metadata['omega_1d'] = {
    'name': 'Specific TKE dissipation rate',
    'shortname': 'Omega',
    'unit': 's-1',
    'filename': 'TurbOmega1d',
}
field_metadata['density_1d'] = {
    'name': 'Suspension density',
    'shortname': 'Density',
    'unit': 'kg m-3',
    'filename': 'Density1d',
}
field_metadata['density_grad_1d'] = {
    'name': 'Vertical density gradient',
    'shortname': 'Density gradient',
    'unit': 'kg m-4',
    'filename': 'DensityGradient1d',
}
field_metadata['shear_freq_1d'] = {
    'name': 'Vertical velocity shear',
    'shortname': 'Velocity shear',
    'unit': 's-1',
    'filename': 'VelocityShear1d',
}
field_metadata['eddy_visc_1d'] = {
    'name': 'Turbulent kinematic viscosity',
    'shortname': 'Eddy viscosity',
    'unit': 'm2 s-1',
    'filename': 'EddyVisc1d',
}
field_metadata['eff_visc_1d'] = {
    'name': 'Effective dynamic viscosity',
    'shortname': 'Effective viscosity',
    'unit': 'kg m-1 s-1',
    'filename': 'EffectiveVisc1d',
}
field_metadata['diffusivity_1d'] = {
    'name': 'Holistic sediment diffusivity',
    'shortname': 'Diffusivity',
    'unit': 'm2 s-1',
    'filename': 'Diffusivity1d',
}
field_metadata['settling_velocity_1d'] = {
    'name': 'Settling velocity',
    'shortname': 'Settling velocity',
    'unit': 'm s-1',
    'filename': 'SettlingVelocity1d',
}
field_metadata['buoy_flux_1d'] = {
    'name': 'Buoyancy destruction of TKE',
    'shortname': 'Buoyancy flux',
    'unit': 'm2 s-3',
    'filename': 'BuoyancyFlux1d',
}
field_metadata['uv_magnitude'] = {
    'name': 'Velocity magnitude history',
    'shortname': 'Velocity',
    'unit': 'm s-1',
    'filename': 'VelocityHistory',
}
field_metadata['sediment'] = {
    'name': 'Sediment concentration history',
    'shortname': 'Concentration',
    'unit': 'kg m-3',
    'filename': 'SedimentHistory',
}
field_metadata['tke'] = {
    'name': 'Turbulent kinetic energy history',
    'shortname': 'TKE',
    'unit': 'm2 s-2',
    'filename': 'TKEHistory',
}
field_metadata['shear_magnitude'] = {
    'name': 'Velocity shear magnitude history',
    'shortname': 'Velocity shear',
    'unit': 's-1',
    'filename': 'ShearHistory',
}
