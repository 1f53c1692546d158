# ==================================================
# sequencefile/const.py
# ==================================================
MAGIC = b"SEQ"            # 3-byte magic, followed by a 1-byte version
VERSION = 6               # 6 = header carries metadata
MIN_VERSION = 5           # 5 = header carries the codec class name
SYNC_SIZE = 16            # bytes in a sync marker
SYNC_ESCAPE = -1          # int32 written in place of a record length before a sync
SYNC_INTERVAL = 100 * (4 + SYNC_SIZE)   # escape + marker, as Hadoop sizes it
MAX_SYNC_READ = 100 * 1024 * 1024
MAX_METADATA_PAIRS = 1024
DEFAULT_BLOCK_SIZE = 1000 * 1000   # io.seqfile.compress.blocksize

INT_FMT = ">i"
LONG_FMT = ">q"

# -------- Writable class names --------------------------------------------
BYTES_WRITABLE = "org.apache.hadoop.io.BytesWritable"
TEXT = "org.apache.hadoop.io.Text"
INT_WRITABLE = "org.apache.hadoop.io.IntWritable"
LONG_WRITABLE = "org.apache.hadoop.io.LongWritable"
NULL_WRITABLE = "org.apache.hadoop.io.NullWritable"

# -------- Codec class names -----------------------------------------------
ZLIB_CODEC = "org.apache.hadoop.io.compress.DefaultCodec"
GZIP_CODEC = "org.apache.hadoop.io.compress.GzipCodec"
BZIP2_CODEC = "org.apache.hadoop.io.compress.BZip2Codec"
SNAPPY_CODEC = "org.apache.hadoop.io.compress.SnappyCodec"
LZ4_CODEC = "org.apache.hadoop.io.compress.Lz4Codec"
ZSTD_CODEC = "org.apache.hadoop.io.compress.ZStandardCodec"

DEFAULT_CODEC = "bzip2"
FIXTURE_SUFFIX = ".sequencefile"
