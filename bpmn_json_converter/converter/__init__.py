"""
Editor JSON conversion.

Property codec, geometry, stencil registry, element converters and the
graph assembler that drives them. Import from the submodules directly;
``bpmn_json_converter`` re-exports the public entry points.
"""
