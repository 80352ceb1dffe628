from issue_upserter.main import main

raise SystemExit(main())
