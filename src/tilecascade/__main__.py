from tilecascade.main import main

raise SystemExit(main())
