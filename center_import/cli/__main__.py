from center_import.cli.main import main

raise SystemExit(main())
