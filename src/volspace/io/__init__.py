"""
Interoperability with neuroimaging file objects.

Functions
---------
volume_from_nifti : Build a VolumeDescriptor from a nibabel image
volume_to_nifti : Build a Nifti1Image from a 3-D VolumeDescriptor
axis_codes : Anatomical orientation codes of a 3-D volume
"""

from volspace.io.nifti import axis_codes, volume_from_nifti, volume_to_nifti

__all__ = ["volume_from_nifti", "volume_to_nifti", "axis_codes"]
