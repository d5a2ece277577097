""" Typed access to remote memory. :class:`TypedMemory` adds fixed-width
    integer, float and array accessors to anything that provides
    ``mem_read(address, size, pid)`` and ``mem_write(address, data, pid)``.
    Values are little-endian, matching the target's byte order.
"""

import struct

try:
    import numpy
except ImportError:
    numpy = None


_formats = {
    'u8': struct.Struct('<B'),
    'u16': struct.Struct('<H'),
    'u32': struct.Struct('<I'),
    'u64': struct.Struct('<Q'),
    'i8': struct.Struct('<b'),
    'i16': struct.Struct('<h'),
    'i32': struct.Struct('<i'),
    'i64': struct.Struct('<q'),
    'f32': struct.Struct('<f'),
    'f64': struct.Struct('<d'),
}


def _reader(kind):

    packer = _formats[kind]

    def read(self, address, pid, timeout=...):
        data = self.mem_read(address, packer.size, pid, timeout=timeout)
        return packer.unpack(data)[0]

    read.__name__ = 'read_' + kind
    read.__doc__ = ' Read one %s value from *address* in process *pid*. ' % (kind)
    return read


def _writer(kind):

    packer = _formats[kind]

    def write(self, address, value, pid):
        try:
            data = packer.pack(value)
        except struct.error as e:
            raise ValueError('%r does not fit in %s: %s' % (value, kind, e))

        return self.mem_write(address, data, pid)

    write.__name__ = 'write_' + kind
    write.__doc__ = ' Write *value* as %s to *address* in process *pid*. ' % (kind)
    return write


class TypedMemory:
    """ Mixin providing ``read_<type>`` and ``write_<type>`` methods for
        each of u8, u16, u32, u64, i8, i16, i32, i64, f32 and f64, plus
        numpy array access via :func:`read_array` and :func:`write_array`.
    """

    read_u8 = _reader('u8')
    read_u16 = _reader('u16')
    read_u32 = _reader('u32')
    read_u64 = _reader('u64')
    read_i8 = _reader('i8')
    read_i16 = _reader('i16')
    read_i32 = _reader('i32')
    read_i64 = _reader('i64')
    read_f32 = _reader('f32')
    read_f64 = _reader('f64')

    write_u8 = _writer('u8')
    write_u16 = _writer('u16')
    write_u32 = _writer('u32')
    write_u64 = _writer('u64')
    write_i8 = _writer('i8')
    write_i16 = _writer('i16')
    write_i32 = _writer('i32')
    write_i64 = _writer('i64')
    write_f32 = _writer('f32')
    write_f64 = _writer('f64')


    def read_array(self, address, dtype, shape, pid, timeout=...):
        """ Read an N-dimensional array of *dtype* elements starting at
            *address*. The *dtype* is anything :func:`numpy.dtype` accepts;
            multi-byte types without an explicit byte order are read as
            little-endian.
        """

        if numpy is None:
            raise ImportError('numpy module not available')

        dtype = numpy.dtype(dtype)
        if dtype.byteorder == '=':
            dtype = dtype.newbyteorder('<')

        try:
            shape = tuple(shape)
        except TypeError:
            shape = (shape,)

        count = 1
        for dimension in shape:
            count *= int(dimension)

        data = self.mem_read(address, count * dtype.itemsize, pid, timeout=timeout)
        serialized = numpy.frombuffer(data, dtype=dtype)
        return serialized.reshape(shape)


    def write_array(self, address, array, pid):
        """ Write the contents of *array* to *address*, in C order, with any
            multi-byte elements converted to little-endian.
        """

        if numpy is None:
            raise ImportError('numpy module not available')

        array = numpy.asarray(array)
        dtype = array.dtype
        if dtype.byteorder in ('=', '>') and dtype.itemsize > 1:
            array = array.astype(dtype.newbyteorder('<'))

        return self.mem_write(address, array.tobytes(order='C'), pid)


# end of class TypedMemory


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
