from page_verdict.cli import main

raise SystemExit(main())
