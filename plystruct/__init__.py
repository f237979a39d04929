"""
# Plystruct: PLY files for humans.

The PLY (Polygon File Format) file is made of a textual header, describing
a list of "elements" each one with its "properties", and of a payload
containing, for each element in the order of the header, the declared number
of instances encoded as ascii text or binary (little or big endian).

The main operations are

 1. read(): parse the header (see plystruct.grammar) and then decode the
    payload (see plystruct.parser) populating one instance per record through
    the PropertyAccess capability (see plystruct.properties).

 2. write(): check that the instances agree with the header and encode the
    header text followed by the payload (see plystruct.writer).

Both are exposed by plystruct.core.Ply:

    from plystruct.core import Ply

    ply = Ply.read('cube.ply')
    for vertex in ply.payload['vertex']:
        print(vertex.value('x'), vertex.value('y'), vertex.value('z'))

The instances are DefaultElement (an ordered mapping) unless a different
element factory is passed, like a plystruct.record.Record subclass.
"""
