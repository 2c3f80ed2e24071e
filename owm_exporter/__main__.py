from owm_exporter.cli import main

raise SystemExit(main())
