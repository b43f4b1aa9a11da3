from wordcounter import main

raise SystemExit(main())
