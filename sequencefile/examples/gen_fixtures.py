# ==================================================
# examples/gen_fixtures.py
# ==================================================
import argparse, logging, os
from sequencefile import CODECS, SequenceFileError, generate_all
from sequencefile.const import DEFAULT_CODEC

def main(argv=None):
    p = argparse.ArgumentParser(
        description="write the record- and block-compressed Alice/Bob sequencefiles")
    p.add_argument("--out-dir", default=os.getenv("SEQFILE_OUT_DIR", "."),
                   help="directory for the two files (must exist)")
    p.add_argument("--codec", choices=sorted(CODECS),
                   default=os.getenv("SEQFILE_CODEC", DEFAULT_CODEC))
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args(argv)

    level = "DEBUG" if args.verbose else os.getenv("SEQFILE_LOG_LEVEL", "WARNING")
    level = logging.getLevelName(level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        paths = generate_all(args.out_dir, args.codec)
    except SequenceFileError as exc:
        p.exit(1, f"gen_fixtures: {exc}\n")
    for path in paths:
        print("  ⋄ wrote", path)
    return paths

if __name__ == "__main__":
    main()
