from kiroboot.cli import main

raise SystemExit(main())
