from filestore.cli import main

raise SystemExit(main())
