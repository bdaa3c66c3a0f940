from pmdsummary.cli import main

raise SystemExit(main())
