"""duetcompose: two-source (duet) video composition planning.

Reads each source's size, rotation and duration, decides the canvas and
per-input placement for a side-by-side or picture-in-picture layout,
aligns the secondary timeline to the primary, and hands the resulting
plan to a renderer. Jobs can be declared in YAML duet manifests.
"""
