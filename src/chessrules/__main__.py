from chessrules.cli import main

raise SystemExit(main())
