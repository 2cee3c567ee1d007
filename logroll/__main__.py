from logroll.cli import main

raise SystemExit(main())
