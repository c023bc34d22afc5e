import struct

from bsplump import Brush, MapType, Node, decode_lump
from bsplump.logger import context, init_logging

LOGGER = init_logging(main_logger='example')

# Three Source brushes: first side, side count, contents.
brush_data = struct.pack('<9i', 0, 6, 1, 6, 5, 1, 11, 6, 0x2000)
for brush in Brush.read_lump(brush_data, MapType.SOURCE20):
	LOGGER.info('Sides {} (contents={:x})', brush.side_range, brush.contents)

# Quake 3 brushes have a texture instead, contents is -1.
brush = Brush.from_bytes(struct.pack('<iii', 12, 4, 3), 'quake3')
brush.has_contents  # False

# Call of Duty only stores the side count and texture, as shorts.
Brush.from_bytes(struct.pack('<hh', 7, 9), MapType.COD)  # Brush(first_side=-1, num_sides=7, texture=9, contents=-1)

# Nodes are padded out with bounds and face info, which are skipped.
node_data = struct.pack('<iii', 0, 1, -1) + bytes(20) + struct.pack('<iii', 1, -2, -3) + bytes(20)
with context('nodes'):
	for node in decode_lump(Node, node_data, MapType.SOURCE20, workers=2):
		for child in node.children:
			if Node.is_leaf(child):
				LOGGER.info('Plane {} -> leaf {}', node.plane, Node.leaf_index(child))
			else:
				LOGGER.info('Plane {} -> node {}', node.plane, child)

# Unknown or unsupported formats always fail, there's no best-guess decode.
Node.LAYOUTS.formats  # Everything except CoD 2/4.
Node.LAYOUTS.record_size(MapType.VINDICTUS)  # 48
