VERSION = "0.1.0"
PROG_NAME = "owm_exporter"
