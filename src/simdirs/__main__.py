from simdirs.cli import main

raise SystemExit(main())
